"""Outbound HTTP for webhook and Slack actions (implements IHttpDispatcher).

Best-effort: transport errors and non-2xx responses are reported in a
DeliveryReport, never raised, and never retried here.
"""

from __future__ import annotations

from typing import Any

import httpx

from app.application.dtos.workflow import DeliveryReport
from app.shared.enums import DeliveryStatus
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_ALLOWED_METHODS = frozenset({"POST", "PUT", "PATCH"})


class HttpxDispatcher:
    """Sends JSON requests with httpx; reuses the app-wide client when provided."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._client = http_client
        self._timeout = timeout

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        return await client.request(
            method, url, json=json, headers=headers, timeout=self._timeout
        )

    async def send(
        self,
        url: str,
        json: dict[str, Any],
        *,
        method: str = "POST",
        headers: dict[str, str] | None = None,
    ) -> DeliveryReport:
        """Send a JSON request; report delivered on 2xx, failed otherwise."""
        verb = (method or "POST").upper()
        if verb not in _ALLOWED_METHODS:
            return DeliveryReport(
                status=DeliveryStatus.FAILED,
                error=f"Unsupported method: {method}",
            )
        try:
            if self._client is not None:
                response = await self._request(self._client, verb, url, json, headers)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._request(client, verb, url, json, headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Outbound %s %s failed: %s", verb, url, e)
            return DeliveryReport(status=DeliveryStatus.FAILED, error=str(e) or type(e).__name__)
        if response.is_success:
            return DeliveryReport(
                status=DeliveryStatus.DELIVERED, status_code=response.status_code
            )
        logger.warning(
            "Outbound %s %s returned status=%d", verb, url, response.status_code
        )
        return DeliveryReport(
            status=DeliveryStatus.FAILED,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}",
        )
