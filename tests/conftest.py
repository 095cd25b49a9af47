"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A fast credential manager (bcrypt minimum cost)
- A fresh in-memory repository per test
- A recording notification dispatcher
- An application client wired to the in-memory store
"""

from collections.abc import Generator
from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from greetme.adapters.repository.memory import InMemoryAccountRepository
from greetme.api.dependencies import get_notifier
from greetme.api.main import create_app
from greetme.config.settings import Settings
from greetme.domain.credentials import CredentialManager
from greetme.domain.lifecycle import AccountService

FAST_ROUNDS = 4


@dataclass
class RecordingNotifier:
    """NotificationDispatcher double that records every call."""

    verifications: list[tuple[str, str]] = field(default_factory=list)
    welcomes: list[tuple[str, str]] = field(default_factory=list)

    def send_verification(self, email: str, token: str) -> None:
        self.verifications.append((email, token))

    def send_welcome(self, email: str, name: str) -> None:
        self.welcomes.append((email, name))

    def token_for(self, email: str) -> str:
        """Token of the most recent verification notice for ``email``."""
        return [token for sent_to, token in self.verifications if sent_to == email][-1]


def make_settings(**overrides) -> Settings:
    """Test settings that ignore any local .env file."""
    values = {"bcrypt_cost": FAST_ROUNDS, "use_postgres": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def credentials() -> CredentialManager:
    return CredentialManager(rounds=FAST_ROUNDS)


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    notifier: RecordingNotifier,
    credentials: CredentialManager,
) -> AccountService:
    return AccountService(repository=repository, notifier=notifier, credentials=credentials)


@pytest.fixture
def valid_registration() -> dict[str, str]:
    return {
        "name": "A",
        "telephone": "1234567890",
        "email": "a@x.com",
        "nickname": "a",
        "password": "secret1",
    }


@pytest.fixture
def client(notifier: RecordingNotifier) -> Generator[TestClient, None, None]:
    """
    Client for a full application on the in-memory store.

    The lifespan runs (context manager), so the store is created as in
    production; notifications go to the recording notifier.
    """
    app = create_app(make_settings())
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_factory():
    """Build an application with test settings; keyword arguments override settings."""

    def factory(**overrides):
        return create_app(make_settings(**overrides))

    return factory
