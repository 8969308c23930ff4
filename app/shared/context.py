"""Request context management using contextvars.

Holds the request and correlation ids of the request being served so log
records written anywhere below the HTTP layer (repositories, the workflow
engine, action handlers) can be tied back to the originating call.

Usage:
    token = bind_request_ids(request_id="abc", correlation_id="abc")
    ...
    reset_request_ids(token)
"""

import logging
from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass(frozen=True)
class RequestIds:
    """Immutable snapshot of the ids bound to the current request."""

    request_id: str | None = None
    correlation_id: str | None = None


_request_ids: ContextVar[RequestIds] = ContextVar("request_ids", default=RequestIds())


def bind_request_ids(
    request_id: str | None = None, correlation_id: str | None = None
) -> Token[RequestIds]:
    """Bind ids for the current async task; unset fields keep their current value."""
    current = _request_ids.get()
    return _request_ids.set(
        RequestIds(
            request_id=request_id or current.request_id,
            correlation_id=correlation_id or current.correlation_id,
        )
    )


def reset_request_ids(token: Token[RequestIds]) -> None:
    _request_ids.reset(token)


def get_request_ids() -> RequestIds:
    return _request_ids.get()


class RequestContextFilter(logging.Filter):
    """Copy the bound ids onto every log record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ids = _request_ids.get()
        record.request_id = ids.request_id or "-"
        record.correlation_id = ids.correlation_id or "-"
        return True
