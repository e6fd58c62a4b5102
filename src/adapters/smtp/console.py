"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification codes and reset links for
development.
"""

import logging

from .messages import build_reset_url

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For development purposes - the SMTP adapter delivers real mail.
    """

    def __init__(self, app_base_url: str = "http://localhost:3000") -> None:
        self.app_base_url = app_base_url

    def send_verification_email(self, email: str, code: str, name: str) -> None:
        """
        Log verification code to console (simulates email delivery).

        Args:
            email: Recipient email address (normalized by domain layer)
            code: 6-digit verification code
            name: Customer display name
        """
        logger.info("[VERIFICATION] Email: %s Name: %s Code: %s", email, name, code)

    def send_reset_password_email(self, email: str, token: str, name: str) -> None:
        """Log the password reset link to console."""
        reset_url = build_reset_url(self.app_base_url, token)
        logger.info("[PASSWORD_RESET] Email: %s Name: %s Link: %s", email, name, reset_url)
