"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers HTML verification and reset emails over SMTP with STARTTLS.
Errors propagate to the caller; the domain service decides that a failed
send does not fail the credential operation.
"""

import logging
import smtplib
from email.message import EmailMessage

from .messages import (
    RESET_PASSWORD_SUBJECT,
    VERIFICATION_SUBJECT,
    build_reset_url,
    reset_password_html,
    verification_html,
)

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str | None,
        password: str | None,
        sender: str | None,
        app_base_url: str,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user or "no-reply@example.com"
        self.app_base_url = app_base_url
        self.timeout = timeout

    def send_verification_email(self, email: str, code: str, name: str) -> None:
        self._send(email, VERIFICATION_SUBJECT, verification_html(code, name))

    def send_reset_password_email(self, email: str, token: str, name: str) -> None:
        reset_url = build_reset_url(self.app_base_url, token)
        self._send(email, RESET_PASSWORD_SUBJECT, reset_password_html(reset_url, name))

    def _send(self, to_email: str, subject: str, html: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content("Your email client does not support HTML.")
        msg.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.user and self.password:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)
        logger.info("Sent '%s' email to %s", subject, to_email)
