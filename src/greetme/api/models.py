"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request fields are optional on purpose: presence and format rules are
enforced by the domain so that the first failing rule is reported.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    name: str | None = None
    telephone: str | None = Field(None, description="10 to 15 digits")
    email: str | None = None
    nickname: str | None = None
    password: str | None = Field(None, description="User password (min 6 characters)")


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    user_id: int = Field(..., serialization_alias="userId")


class IdentityModel(BaseModel):
    id: int
    name: str
    email: str


class VerifyResponse(BaseModel):
    """Response model for successful email verification."""

    message: str
    user: IdentityModel


class LoginRequest(BaseModel):
    """Request model for password login."""

    email: str | None = None
    password: str | None = None


class LoginUserModel(IdentityModel):
    nickname: str


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    user: LoginUserModel


class ProfileModel(LoginUserModel):
    created_at: datetime


class ProfileResponse(BaseModel):
    """Response model for the public profile."""

    user: ProfileModel


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
