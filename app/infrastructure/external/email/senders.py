"""Mail senders for the send_email workflow action (implement IMailSender)."""

from __future__ import annotations

from email.message import EmailMessage

import aiosmtplib

from app.infrastructure.exceptions import MailDeliveryError
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyMailSender:
    """IMailSender that logs instead of sending. Used when no SMTP host is configured."""

    async def send(self, to: str, subject: str, html: str) -> None:
        logger.info(
            "Workflow send_email: would send to %s (subject=%r)", to, (subject or "")[:80]
        )
        logger.debug("Workflow send_email body (first 500 chars): %s", (html or "")[:500])


class SmtpMailSender:
    """Async SMTP delivery via aiosmtplib (implicit TLS or STARTTLS).

    Opens one connection per message; raises MailDeliveryError on transport
    failure so the calling action is recorded as failed.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        mail_from: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        start_tls: bool = False,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._mail_from = mail_from
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._start_tls = start_tls
        self._timeout = timeout

    def _build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(html, subtype="html")
        return message

    async def send(self, to: str, subject: str, html: str) -> None:
        """Send one HTML message to `to` (comma-separated recipients allowed)."""
        message = self._build_message(to, subject, html)
        try:
            await aiosmtplib.send(
                message,
                hostname=self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                use_tls=self._use_tls,
                start_tls=self._start_tls,
                timeout=self._timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning("SMTP send to %s failed: %s", to, e)
            raise MailDeliveryError(to, str(e)) from e
        logger.info("Workflow send_email: sent to %s (subject=%r)", to, subject[:80])
