"""
Account lifecycle service - Registration, verification, login and profiles.

This module contains the core business logic of the account system:
input validation in a fixed order, uniqueness rules, the forward-only
UNVERIFIED -> VERIFIED transition, and the login rules.

Validation Order (first failure wins)
=====================================

1. presence      - every field is non-empty; only the password may be all spaces
2. email format  - local@domain.tld, no whitespace
3. phone format  - 10 to 15 digits
4. password      - at least 6 characters

Verification failures never reveal whether the token was wrong or the
account was already verified. Login failures for an unknown email and
for a wrong password carry the same message.
"""

import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

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
from .ports import AccountRepository, NotificationDispatcher

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TELEPHONE_PATTERN = re.compile(r"^[0-9]{10,15}$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    """Normalize email address for storage and lookup: strip + lowercase."""
    return email.strip().lower()


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


@contextmanager
def _internal_failure(message: str) -> Iterator[None]:
    """Re-raise unexpected errors as InternalError with a generic message."""
    try:
        yield
    except AccountError:
        raise
    except Exception as e:
        logger.exception(message)
        raise InternalError(message) from e


@dataclass
class AccountService:
    """
    Domain service for the account lifecycle.

    Orchestrates the repository, the credential manager and the
    notification dispatcher.
    """

    repository: AccountRepository
    notifier: NotificationDispatcher
    credentials: CredentialManager = field(default_factory=CredentialManager)

    def register(
        self,
        name: str | None,
        telephone: str | None,
        email: str | None,
        nickname: str | None,
        password: str | None,
    ) -> int:
        """
        Register a new, unverified account and send its verification link.

        Args:
            name: Display name
            telephone: 10-15 digit telephone number
            email: Email address (will be normalized)
            nickname: Display nickname
            password: Plaintext password (will be hashed)

        Returns:
            Identifier of the new account

        Raises:
            ValidationError: If a field is missing or malformed
            ConflictError: If the email or telephone is already registered
            InternalError: On unexpected store or hashing failure
        """
        if any(_is_blank(value) for value in (name, telephone, email, nickname)) or not password:
            raise ValidationError("All fields are required.")

        normalized_email = normalize_email(email)
        telephone = telephone.strip()

        if not EMAIL_PATTERN.match(normalized_email):
            raise ValidationError("Invalid email format.")
        if not TELEPHONE_PATTERN.match(telephone):
            raise ValidationError("Invalid telephone number format.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 6 characters long.")

        with _internal_failure("Registration failed. Please try again."):
            existing = self.repository.find_by_email_or_telephone(normalized_email, telephone)
            if existing is not None:
                if existing.email == normalized_email:
                    raise ConflictError("Email already exists.")
                raise ConflictError("Telephone number already exists.")

            token = self.credentials.generate_token()
            account = self.repository.insert(
                Account(
                    name=name.strip(),
                    telephone=telephone,
                    email=normalized_email,
                    nickname=nickname.strip(),
                    password_hash=self.credentials.hash_password(password),
                    verification_token=token,
                )
            )

        logger.info("Registered account %s", account.id)
        self._dispatch(self.notifier.send_verification, normalized_email, token)
        return account.id

    def verify(self, email: str | None, token: str | None) -> VerifiedIdentity:
        """
        Confirm email ownership with the token issued at registration.

        Raises:
            ValidationError: If email or token is missing
            NotFoundOrAlreadyVerified: If no unverified account matches
            InternalError: On unexpected store failure
        """
        if _is_blank(email) or _is_blank(token):
            raise ValidationError("Missing verification token or email.")

        with _internal_failure("Email verification failed. Please try again."):
            account = self.repository.mark_verified(normalize_email(email), token)

        if account is None:
            raise NotFoundOrAlreadyVerified(
                "Invalid verification token or email, or account already verified."
            )

        logger.info("Verified account %s", account.id)
        self._dispatch(self.notifier.send_welcome, account.email, account.name)
        return VerifiedIdentity(id=account.id, name=account.name, email=account.email)

    def login(self, email: str | None, password: str | None) -> Profile:
        """
        Check a password login. No session is issued.

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentials: Unknown email or wrong password
            UnverifiedAccount: Account exists but is not verified yet
            InternalError: On unexpected store failure
        """
        if _is_blank(email) or not password:
            raise ValidationError("Email and password are required.")

        with _internal_failure("Login failed. Please try again."):
            account = self.repository.find_by_email(normalize_email(email))

            if account is None:
                self.credentials.verify_dummy(password)
                raise InvalidCredentials("Invalid email or password.")

            if account.state is not AccountState.VERIFIED:
                raise UnverifiedAccount("Please verify your email address before logging in.")

            if not self.credentials.verify_password(password, account.password_hash):
                raise InvalidCredentials("Invalid email or password.")

            self.repository.touch_updated_at(account.id)

        return Profile.from_account(account)

    def get_profile(self, account_id: int) -> Profile:
        """
        Return the public profile of a verified account.

        Raises:
            NotFound: If the account is absent or unverified
            InternalError: On unexpected store failure
        """
        with _internal_failure("Failed to fetch user profile."):
            account = self.repository.find_by_id(account_id)

        if account is None or account.state is not AccountState.VERIFIED:
            raise NotFound("User not found.")
        return Profile.from_account(account)

    def _dispatch(self, send: Callable[..., None], *args: str) -> None:
        """Fire-and-forget notification; failures are logged, never raised."""
        try:
            send(*args)
        except Exception:
            logger.exception("Notification dispatch failed")
