"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle (registration, email
verification, login) and defines its own port interfaces for
infrastructure abstraction.
"""

from .account import Account, AccountState, Profile, VerifiedIdentity
from .credentials import CredentialManager
from .exceptions import (
    AccountError,
    ConflictError,
    InternalError,
    InvalidCredentials,
    NotFound,
    NotFoundOrAlreadyVerified,
    UnverifiedAccount,
    ValidationError,
)
from .lifecycle import AccountService, normalize_email
from .ports import AccountRepository, NotificationDispatcher

__all__ = [
    "Account",
    "AccountError",
    "AccountRepository",
    "AccountService",
    "AccountState",
    "ConflictError",
    "CredentialManager",
    "InternalError",
    "InvalidCredentials",
    "NotFound",
    "NotFoundOrAlreadyVerified",
    "NotificationDispatcher",
    "Profile",
    "UnverifiedAccount",
    "ValidationError",
    "VerifiedIdentity",
    "normalize_email",
]
