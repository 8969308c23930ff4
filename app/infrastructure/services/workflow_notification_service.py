"""Workflow notification: log-only in-app notification sender (notify_user action)."""

from __future__ import annotations

import logging
from typing import Any

from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyNotificationService:
    """INotificationService implementation that logs instead of pushing to a client.

    Delivery (sockets, push) is an external concern; production can swap in a
    queue-backed implementation. Fire-and-forget: never raises.
    """

    async def notify_user(self, user_id: str, payload: dict[str, Any]) -> None:
        """Log the notification for user_id."""
        title_preview = str(payload.get("title") or "")[:80]
        if not user_id:
            logger.info(
                "Workflow notify_user: no user id, skipping (title=%r)", title_preview
            )
            return
        logger.info(
            "Workflow notify_user: would notify user %s (title=%r)",
            user_id,
            title_preview,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Workflow notify_user payload: %s (at %s)",
                payload,
                utc_now().isoformat(),
            )
