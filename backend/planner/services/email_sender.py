"""Outgoing email.

Two interchangeable senders: the console sender logs messages instead of
delivering them (local development, or when no SMTP host is configured); the
SMTP sender delivers through the configured relay.
"""

import logging
import smtplib
from email.message import EmailMessage

from planner.config import settings

logger = logging.getLogger(__name__)


class EmailSender:
    def send(self, to_address: str, subject: str, body: str) -> bool:
        raise NotImplementedError


class ConsoleEmailSender(EmailSender):
    """Logs the message; nothing leaves the process."""

    def send(self, to_address: str, subject: str, body: str) -> bool:
        logger.info(
            "EMAIL (console mode, not sent)\nTo: %s\nSubject: %s\n%s\n%s",
            to_address,
            subject,
            "-" * 46,
            body,
        )
        return True


class SmtpEmailSender(EmailSender):
    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        from_address: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ):
        if not host or not host.strip():
            raise ValueError("Email host is not configured.")
        if not (from_address or username):
            raise ValueError("Email 'From' address is not configured.")

        self.host = host.strip()
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address or username
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, to_address: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, to_address: str, subject: str, body: str) -> bool:
        """Deliver a plain-text message. Returns False if the relay rejects it or is unreachable."""
        message = self._build_message(to_address, subject, body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
                if self.use_tls:
                    client.starttls()
                if self.username:
                    client.login(self.username, self.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email to %s via %s:%s", to_address, self.host, self.port)
            return False

        logger.info("Email '%s' sent to %s", subject, to_address)
        return True


def get_email_sender() -> EmailSender:
    """FastAPI dependency: console sender in development or without an SMTP host."""
    if settings.ENVIRONMENT == "development" or not settings.EMAIL_HOST.strip():
        return ConsoleEmailSender()
    return SmtpEmailSender(
        host=settings.EMAIL_HOST,
        port=settings.EMAIL_PORT,
        username=settings.EMAIL_USERNAME,
        password=settings.EMAIL_PASSWORD,
        from_address=settings.EMAIL_FROM,
        use_tls=settings.EMAIL_USE_TLS,
    )
