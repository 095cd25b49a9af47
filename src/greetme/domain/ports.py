"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .account import Account


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_email_or_telephone(self, email: str, telephone: str) -> Account | None:
        """
        Find an account holding either the email or the telephone.

        When the email and the telephone belong to different accounts,
        the account matching the email is returned.

        Args:
            email: Normalized email address
            telephone: Trimmed telephone number

        Returns:
            Matching account, or None
        """
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Find an account by normalized email address."""
        ...

    def find_by_id(self, account_id: int) -> Account | None:
        """Find an account by identifier."""
        ...

    def find_by_email_and_token(self, email: str, token: str) -> Account | None:
        """Find the account holding this email and verification token."""
        ...

    def insert(self, account: Account) -> Account:
        """
        Persist a new account.

        The uniqueness check on email and telephone is serialized with
        the write, so of two concurrent inserts of the same email exactly
        one succeeds.

        Args:
            account: Unsaved account (id and timestamps unset)

        Returns:
            The stored account with id and timestamps assigned

        Raises:
            ConflictError: If the email or telephone is already taken
        """
        ...

    def mark_verified(self, email: str, token: str) -> Account | None:
        """
        Atomically transition an account from UNVERIFIED to VERIFIED.

        Only matches an account that is still unverified and whose token
        equals ``token``. The token is cleared and ``updated_at`` refreshed.

        Returns:
            The verified account, or None if nothing matched
        """
        ...

    def touch_updated_at(self, account_id: int) -> None:
        """Refresh ``updated_at`` of an account."""
        ...


class NotificationDispatcher(Protocol):
    """Port interface for account notifications (fire-and-forget)."""

    def send_verification(self, email: str, token: str) -> None:
        """
        Send the verification link for a freshly registered account.

        Args:
            email: Recipient email address
            token: Verification token
        """
        ...

    def send_welcome(self, email: str, name: str) -> None:
        """Send the welcome notice after successful verification."""
        ...
