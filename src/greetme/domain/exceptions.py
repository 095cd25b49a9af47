"""
Domain exceptions - Semantic error types for the account lifecycle.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The exception message is the client-facing text.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class ValidationError(AccountError):
    """Client input is malformed (first failing rule only)."""

    pass


class ConflictError(AccountError):
    """Email or telephone is already taken by another account."""

    pass


class InvalidCredentials(AccountError):
    """Unknown email or wrong password - deliberately indistinguishable."""

    pass


class UnverifiedAccount(AccountError):
    """Password login attempted before the email was verified."""

    pass


class NotFoundOrAlreadyVerified(AccountError):
    """No unverified account matches the email and token."""

    pass


class NotFound(AccountError):
    """Account is absent or not visible (unverified)."""

    pass


class InternalError(AccountError):
    """Unexpected store or hashing failure, reported generically."""

    pass
