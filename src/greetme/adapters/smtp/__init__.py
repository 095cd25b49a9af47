"""Notification adapters."""

from .console import ConsoleNotificationDispatcher

__all__ = ["ConsoleNotificationDispatcher"]
