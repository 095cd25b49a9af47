"""
Console notification adapter - Implements NotificationDispatcher protocol.

This module provides a console-based implementation of the domain's
notification port, logging verification links and welcome notices
instead of delivering email.
"""

import logging
from urllib.parse import quote

logger = logging.getLogger(__name__)


class ConsoleNotificationDispatcher:
    """
    Implements NotificationDispatcher protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - an SMTP or API-based sender would
    replace it in production.
    """

    def __init__(self, frontend_url: str) -> None:
        """
        Args:
            frontend_url: Base URL of the frontend serving the /verify page
        """
        self._frontend_url = frontend_url.rstrip("/")

    def verification_link(self, email: str, token: str) -> str:
        return f"{self._frontend_url}/verify?token={token}&email={quote(email, safe='')}"

    def send_verification(self, email: str, token: str) -> None:
        """
        Log the verification link (simulates email delivery).

        Args:
            email: Recipient email address (normalized by domain layer)
            token: Verification token issued at registration
        """
        logger.info(
            "[VERIFICATION] To: %s Link: %s", email, self.verification_link(email, token)
        )

    def send_welcome(self, email: str, name: str) -> None:
        logger.info("[WELCOME] To: %s Subject: Welcome to GreetMe, %s!", email, name)
