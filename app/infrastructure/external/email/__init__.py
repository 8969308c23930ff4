"""Outbound email: SMTP and log-only senders."""

from app.infrastructure.external.email.factory import create_mail_sender
from app.infrastructure.external.email.senders import LogOnlyMailSender, SmtpMailSender

__all__ = ["LogOnlyMailSender", "SmtpMailSender", "create_mail_sender"]
