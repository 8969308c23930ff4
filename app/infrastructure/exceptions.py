"""Infrastructure exceptions for external operations (mail transport).

They extend DealClarityException so presentation can map them to HTTP
responses consistently; inside workflow runs they surface as failed action
outcomes.
"""

from app.domain.exceptions import DealClarityException


class ExternalServiceException(DealClarityException):
    """Base exception for calls to external collaborators."""


class MailDeliveryError(ExternalServiceException):
    """Mail transport rejected or could not deliver a message."""

    def __init__(self, recipient: str, reason: str) -> None:
        super().__init__(
            f"Failed to send email to {recipient}: {reason}",
            "MAIL_DELIVERY_ERROR",
            {"recipient": recipient, "reason": reason},
        )
