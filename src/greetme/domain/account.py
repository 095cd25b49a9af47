"""
Account model - The record managed by the account lifecycle.

Account State Machine (Forward-Only)
====================================

States:
- UNVERIFIED: Initial state after registration (token issued)
- VERIFIED: Terminal state after the emailed token was confirmed

Valid Transitions:
    UNVERIFIED -> VERIFIED   (verification with matching email + token)

Invalid Transitions (never allowed):
    VERIFIED -> any          (VERIFIED is terminal)

The verification token is present if and only if the account is UNVERIFIED.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AccountState(str, Enum):
    """Lifecycle states of an account."""

    UNVERIFIED = "UNVERIFIED"
    VERIFIED = "VERIFIED"


@dataclass
class Account:
    """
    A registered user with credential and verification state.

    ``id``, ``created_at`` and ``updated_at`` are assigned by the store
    on insert and are ``None`` before that.
    """

    name: str
    telephone: str
    email: str
    nickname: str
    password_hash: str
    verification_token: str | None
    is_verified: bool = False
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def state(self) -> AccountState:
        return AccountState.VERIFIED if self.is_verified else AccountState.UNVERIFIED


@dataclass(frozen=True)
class VerifiedIdentity:
    """Public identity returned after a successful verification."""

    id: int
    name: str
    email: str


@dataclass(frozen=True)
class Profile:
    """Public profile of a verified account (no credential data)."""

    id: int
    name: str
    email: str
    nickname: str
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "Profile":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            nickname=account.nickname,
            created_at=account.created_at,
        )
