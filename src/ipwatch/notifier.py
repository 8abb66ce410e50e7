"""Email notification of IP address changes.

This module provides:
- SmtpCredentials: Username/password for SMTP login
- MailSession: Authenticated STARTTLS SMTP session
- EmailNotifier: Sends the "IP changed" email
"""

import logging
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Callable, Optional

from ipwatch.config import (
    KEY_FROM_ADDRESS,
    KEY_PASSWORD,
    KEY_SMTP_PORT,
    KEY_SMTP_SERVER,
    KEY_TO_ADDRESS,
    KEY_USER,
    EmailConfig,
)
from ipwatch.errors import NotificationError

logger = logging.getLogger(__name__)

SUBJECT = "Changed External IP"

# Rendered in place of the previous address on first run
ABSENT_ADDRESS = "none"


@dataclass(frozen=True)
class SmtpCredentials:
    """SMTP login credentials."""

    username: str
    password: str = field(repr=False)


class MailSession:
    """Authenticated, STARTTLS-encrypted SMTP submission session.

    Connects, upgrades to TLS and logs in on enter; sends QUIT and
    closes the connection on exit, including when an error is raised.

    Example:
        creds = SmtpCredentials("me@example.com", "app-password")
        with MailSession("smtp.example.com", 587, creds) as session:
            session.send(message)
    """

    def __init__(
        self,
        host: str,
        port: int,
        credentials: SmtpCredentials,
        smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
    ):
        self._host = host
        self._port = port
        self._credentials = credentials
        self._smtp_factory = smtp_factory or smtplib.SMTP
        self._smtp: Optional[smtplib.SMTP] = None

    def __enter__(self) -> "MailSession":
        smtp = self._smtp_factory(self._host, self._port)
        try:
            smtp.starttls(context=ssl.create_default_context())
            smtp.login(self._credentials.username, self._credentials.password)
        except Exception:
            smtp.close()
            raise
        self._smtp = smtp
        return self

    def __exit__(self, *exc_info) -> None:
        if self._smtp is None:
            return
        try:
            self._smtp.quit()
        except smtplib.SMTPException as e:
            logger.debug(f"SMTP QUIT failed: {e}")
        finally:
            self._smtp.close()
            self._smtp = None

    def send(self, message: EmailMessage) -> None:
        """Submit one message."""
        if self._smtp is None:
            raise RuntimeError("Mail session not open - use context manager")
        self._smtp.send_message(message)


class EmailNotifier:
    """Emails the operator when the public IP changes.

    Settings are validated only when a notification is actually sent,
    so a run with no change never needs working email configuration.
    """

    def __init__(
        self,
        config: EmailConfig,
        smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
    ):
        """Initialize notifier.

        Args:
            config: Email settings.
            smtp_factory: Optional SMTP client constructor (for testing).
        """
        self._config = config
        self._smtp_factory = smtp_factory or smtplib.SMTP

    def build_message(self, previous: str | None, current: str) -> EmailMessage:
        """Compose the change notification.

        Args:
            previous: Last known address, or None on first run.
            current: Newly resolved address.

        Returns:
            Plain text message ready to submit.
        """
        old = previous if previous is not None else ABSENT_ADDRESS

        message = EmailMessage()
        message["From"] = self._config.from_address
        message["To"] = self._config.to_address
        message["Subject"] = SUBJECT
        message.set_content(f"External IP changed from {old} to {current}")
        return message

    def notify(self, previous: str | None, current: str) -> None:
        """Send exactly one change notification.

        Args:
            previous: Last known address, or None on first run.
            current: Newly resolved address.

        Raises:
            NotificationError: If settings are missing or submission fails.
        """
        self._check_settings()
        cfg = self._config

        try:
            port = int(cfg.smtp_port)
        except ValueError as e:
            raise NotificationError(
                f"Invalid {KEY_SMTP_PORT} '{cfg.smtp_port}': {e}"
            ) from e

        credentials = SmtpCredentials(username=cfg.user, password=cfg.password)

        try:
            message = self.build_message(previous, current)
            with MailSession(
                cfg.smtp_server, port, credentials, smtp_factory=self._smtp_factory
            ) as session:
                session.send(message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise NotificationError(
                f"Could not email new IP to '{cfg.to_address}' "
                f"via {cfg.smtp_server}:{port}: {e}"
            ) from e

        logger.info(f"Email sent successfully to '{cfg.to_address}'.")

    def _check_settings(self) -> None:
        """Ensure every email setting is present.

        Raises:
            NotificationError: Naming the missing keys.
        """
        cfg = self._config
        settings = {
            KEY_FROM_ADDRESS: cfg.from_address,
            KEY_TO_ADDRESS: cfg.to_address,
            KEY_SMTP_SERVER: cfg.smtp_server,
            KEY_SMTP_PORT: cfg.smtp_port,
            KEY_USER: cfg.user,
            KEY_PASSWORD: cfg.password,
        }
        missing = [key for key, value in settings.items() if not value]
        if missing:
            raise NotificationError(
                f"Missing email settings: {', '.join(missing)}"
            )
