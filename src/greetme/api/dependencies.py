"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, Request

from greetme.adapters.smtp.console import ConsoleNotificationDispatcher
from greetme.config.settings import Settings
from greetme.domain.credentials import CredentialManager
from greetme.domain.lifecycle import AccountService
from greetme.domain.ports import AccountRepository, NotificationDispatcher


def get_settings_from_app(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_repository(request: Request) -> AccountRepository:
    """
    Get account repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_notifier(request: Request) -> NotificationDispatcher:
    """Get console notification dispatcher (stateless, built per request)."""
    settings = get_settings_from_app(request)
    return ConsoleNotificationDispatcher(frontend_url=settings.frontend_url)


def get_credentials(request: Request) -> CredentialManager:
    """Get the credential manager created at startup."""
    return request.app.state.credentials


def get_account_service(
    repository: AccountRepository = Depends(get_repository),
    notifier: NotificationDispatcher = Depends(get_notifier),
    credentials: CredentialManager = Depends(get_credentials),
) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the repository, notifier and credential manager.
    Each piece is its own dependency so tests can override it.
    """
    return AccountService(repository=repository, notifier=notifier, credentials=credentials)
