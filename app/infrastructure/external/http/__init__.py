"""Outbound HTTP (webhook / Slack delivery)."""

from app.infrastructure.external.http.dispatcher import HttpxDispatcher

__all__ = ["HttpxDispatcher"]
