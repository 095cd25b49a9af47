"""
In-memory repository adapter - Implements AccountRepository protocol.

Development and test store. Every operation runs under a single lock,
so the uniqueness check in insert() and the state check in
mark_verified() are atomic with their writes.
"""

import secrets
import threading
from dataclasses import replace
from datetime import datetime, timezone
from itertools import count

from greetme.domain.account import Account
from greetme.domain.exceptions import ConflictError


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with process-local dicts.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Returned accounts are copies; callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[int, Account] = {}
        self._ids_by_email: dict[str, int] = {}
        self._ids_by_telephone: dict[str, int] = {}
        self._next_id = count(1)

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)

    def find_by_email_or_telephone(self, email: str, telephone: str) -> Account | None:
        with self._lock:
            account_id = self._ids_by_email.get(email)
            if account_id is None:
                account_id = self._ids_by_telephone.get(telephone)
            return self._copy(account_id)

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            return self._copy(self._ids_by_email.get(email))

    def find_by_id(self, account_id: int) -> Account | None:
        with self._lock:
            return self._copy(account_id)

    def find_by_email_and_token(self, email: str, token: str) -> Account | None:
        with self._lock:
            account = self._match_token(email, token)
            return replace(account) if account is not None else None

    def insert(self, account: Account) -> Account:
        """
        Store a new account, assigning id and timestamps.

        Raises:
            ConflictError: If the email or telephone is already taken
        """
        with self._lock:
            if account.email in self._ids_by_email:
                raise ConflictError("Email already exists.")
            if account.telephone in self._ids_by_telephone:
                raise ConflictError("Telephone number already exists.")

            now = _now()
            stored = replace(account, id=next(self._next_id), created_at=now, updated_at=now)
            self._accounts[stored.id] = stored
            self._ids_by_email[stored.email] = stored.id
            self._ids_by_telephone[stored.telephone] = stored.id
            return replace(stored)

    def mark_verified(self, email: str, token: str) -> Account | None:
        with self._lock:
            account = self._match_token(email, token)
            if account is None or account.is_verified:
                return None
            account.is_verified = True
            account.verification_token = None
            account.updated_at = _now()
            return replace(account)

    def touch_updated_at(self, account_id: int) -> None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is not None:
                account.updated_at = _now()

    def _match_token(self, email: str, token: str) -> Account | None:
        account_id = self._ids_by_email.get(email)
        if account_id is None:
            return None
        account = self._accounts[account_id]
        if account.verification_token is None:
            return None
        if not secrets.compare_digest(account.verification_token.encode(), token.encode()):
            return None
        return account

    def _copy(self, account_id: int | None) -> Account | None:
        if account_id is None or account_id not in self._accounts:
            return None
        return replace(self._accounts[account_id])
