"""Mail sender factory: SMTP when configured, log-only otherwise."""

from app.application.interfaces.services import IMailSender
from app.core.config import Settings
from app.infrastructure.external.email.senders import LogOnlyMailSender, SmtpMailSender
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_mail_sender(settings: Settings) -> IMailSender:
    """Create the mail sender for the send_email action from settings."""
    if not settings.smtp_host:
        logger.debug("SMTP_HOST not set; using log-only mail sender")
        return LogOnlyMailSender()
    password = (
        settings.smtp_password.get_secret_value() if settings.smtp_password else None
    )
    return SmtpMailSender(
        settings.smtp_host,
        settings.smtp_port,
        mail_from=settings.mail_from,
        username=settings.smtp_username,
        password=password,
        use_tls=settings.smtp_use_tls,
        start_tls=settings.smtp_start_tls,
    )
