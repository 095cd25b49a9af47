"""
Adversarial tests for account enumeration.

Verifies that an attacker probing login and verification cannot tell
which emails are registered:
- Login for an unknown email and for a wrong password return the same error
- Login for an unknown email still pays for one bcrypt comparison
- Verification does not reveal whether an account was already verified
"""

import statistics
import time
from unittest.mock import patch

import bcrypt
import pytest

from greetme.domain.credentials import CredentialManager
from greetme.domain.exceptions import InvalidCredentials, NotFoundOrAlreadyVerified
from greetme.domain.lifecycle import AccountService

pytestmark = pytest.mark.adversarial


@pytest.fixture
def verified_service(service: AccountService, notifier) -> AccountService:
    service.register("Alice", "1234567890", "alice@example.com", "ali", "secret1")
    service.verify("alice@example.com", notifier.token_for("alice@example.com"))
    return service


class TestLoginEnumeration:
    """Login must not distinguish unknown emails from wrong passwords."""

    def test_messages_identical(self, verified_service: AccountService) -> None:
        messages = set()
        for email, password in [
            ("alice@example.com", "wrong-password"),
            ("nobody@example.com", "wrong-password"),
            ("nobody@example.com", "secret1"),
        ]:
            with pytest.raises(InvalidCredentials) as exc_info:
                verified_service.login(email, password)
            messages.add(str(exc_info.value))

        assert messages == {"Invalid email or password."}

    def test_unknown_email_runs_bcrypt(self, verified_service: AccountService) -> None:
        """Exactly one bcrypt comparison for unknown and for known emails."""
        with patch("greetme.domain.credentials.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
            with pytest.raises(InvalidCredentials):
                verified_service.login("nobody@example.com", "secret1")
            unknown_calls = checkpw.call_count

            with pytest.raises(InvalidCredentials):
                verified_service.login("alice@example.com", "wrong-password")
            known_calls = checkpw.call_count - unknown_calls

        assert unknown_calls == known_calls == 1

    def test_unknown_email_timing_comparable(self, repository, notifier) -> None:
        """With a real work factor both paths take bcrypt time."""
        credentials = CredentialManager(rounds=8)
        service = AccountService(repository=repository, notifier=notifier, credentials=credentials)
        service.register("Alice", "1234567890", "alice@example.com", "ali", "secret1")
        service.verify("alice@example.com", notifier.token_for("alice@example.com"))

        def measure(email: str) -> float:
            times = []
            for _ in range(5):
                start = time.perf_counter()
                with pytest.raises(InvalidCredentials):
                    service.login(email, "wrong-password")
                times.append(time.perf_counter() - start)
            return statistics.median(times)

        known = measure("alice@example.com")
        unknown = measure("nobody@example.com")

        # Same order of magnitude; an unguarded lookup would be ~1000x faster
        assert unknown > known / 5, (
            f"Unknown email answered in {unknown:.4f}s vs {known:.4f}s - "
            f"dummy bcrypt comparison may not be running."
        )


class TestVerificationEnumeration:
    """Verification must not reveal account state."""

    def test_already_verified_same_as_unknown(self, verified_service: AccountService) -> None:
        with pytest.raises(NotFoundOrAlreadyVerified) as already:
            verified_service.verify("alice@example.com", "0" * 64)
        with pytest.raises(NotFoundOrAlreadyVerified) as unknown:
            verified_service.verify("nobody@example.com", "0" * 64)

        assert str(already.value) == str(unknown.value)
