"""
API v1 routes.

Defines REST endpoints for the GreetMe account API:
- POST /api/register - Create an unverified account
- GET  /api/verify - Confirm email with the emailed token
- POST /api/login - Password login
- GET  /api/profile/{id} - Public profile of a verified account

Service calls run in the thread pool; bcrypt must not block the event loop.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from greetme.api.dependencies import get_account_service
from greetme.api.models import (
    ErrorResponse,
    IdentityModel,
    LoginRequest,
    LoginResponse,
    LoginUserModel,
    ProfileModel,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    VerifyResponse,
)
from greetme.domain.exceptions import (
    ConflictError,
    InternalError,
    InvalidCredentials,
    NotFound,
    NotFoundOrAlreadyVerified,
    UnverifiedAccount,
    ValidationError,
)
from greetme.domain.lifecycle import AccountService

router = APIRouter(tags=["v1"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error or email/telephone taken"},
        500: {"model": ErrorResponse, "description": "Registration failed"},
    },
    summary="Register a new user",
    description="Create an unverified account. A verification link is sent to the email.",
)
async def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    """
    Register a new user and send the verification link.

    - **name**, **nickname**: display attributes
    - **telephone**: 10 to 15 digits
    - **email**: unique email address
    - **password**: at least 6 characters
    """
    try:
        account_id = await run_in_threadpool(
            service.register,
            request_data.name,
            request_data.telephone,
            request_data.email,
            request_data.nickname,
            request_data.password,
        )
    except (ValidationError, ConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except InternalError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from None
    return RegisterResponse(
        message="User registered successfully. Please check your email for verification link.",
        user_id=account_id,
    )


@router.get(
    "/verify",
    response_model=VerifyResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing parameters or no matching account"},
        500: {"model": ErrorResponse, "description": "Verification failed"},
    },
    summary="Verify email address",
    description="Confirm the email address with the token from the verification link.",
)
async def verify(
    token: str | None = None,
    email: str | None = None,
    service: AccountService = Depends(get_account_service),
) -> VerifyResponse:
    """
    Verify an account.

    An unknown token and an already verified account return the same error.
    """
    try:
        identity = await run_in_threadpool(service.verify, email, token)
    except (ValidationError, NotFoundOrAlreadyVerified) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except InternalError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from None
    return VerifyResponse(
        message="Thank you for confirming your registration",
        user=IdentityModel(id=identity.id, name=identity.name, email=identity.email),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or unverified account"},
        500: {"model": ErrorResponse, "description": "Login failed"},
    },
    summary="Log in",
    description="Check email and password of a verified account. No session is issued.",
)
async def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Log in with email and password."""
    try:
        profile = await run_in_threadpool(service.login, request_data.email, request_data.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except (InvalidCredentials, UnverifiedAccount) as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from None
    except InternalError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from None
    return LoginResponse(
        message="Login successful",
        user=LoginUserModel(
            id=profile.id, name=profile.name, email=profile.email, nickname=profile.nickname
        ),
    )


@router.get(
    "/profile/{account_id}",
    response_model=ProfileResponse,
    responses={
        404: {"model": ErrorResponse, "description": "User not found or not verified"},
        500: {"model": ErrorResponse, "description": "Profile lookup failed"},
    },
    summary="Get user profile",
)
async def get_profile(
    account_id: str,
    service: AccountService = Depends(get_account_service),
) -> ProfileResponse:
    """Public profile of a verified account. Unverified accounts are not visible."""
    # Non-numeric ids cannot exist; report them like any other unknown id
    if not (account_id.isascii() and account_id.isdigit()):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")

    try:
        profile = await run_in_threadpool(service.get_profile, int(account_id))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except InternalError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from None
    return ProfileResponse(
        user=ProfileModel(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            nickname=profile.nickname,
            created_at=profile.created_at,
        )
    )
