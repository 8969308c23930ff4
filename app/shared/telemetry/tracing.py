"""Span helpers for the workflow engine (trigger and manual runs) and action executor."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

_TRACER_NAME = "app.workflows"

# Only these keyword arguments are copied onto spans; deal payloads never are.
_SPAN_ARG_KEYS = frozenset(
    {"trigger_type", "record_id", "team_id", "workflow_id", "limit"}
)


def _mark(span: trace.Span, error: BaseException | None) -> None:
    if error is None:
        span.set_status(Status(StatusCode.OK))
        return
    span.set_status(Status(StatusCode.ERROR, str(error)))
    span.record_exception(error)


def _arg_attributes(
    arg_names: tuple[str, ...], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> dict[str, str]:
    bound = dict(zip(arg_names, args, strict=False))
    bound.update(kwargs)
    return {
        f"arg.{key}": str(value)
        for key, value in bound.items()
        if key in _SPAN_ARG_KEYS and value is not None
    }


def traced(
    operation_name: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorate an async method so each call runs in its own span.

    Identifier arguments (trigger type, record, team, workflow ids) are recorded
    as ``arg.*`` attributes. Exceptions mark the span as failed and propagate.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        code = func.__code__
        arg_names = code.co_varnames[: code.co_argcount]

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            tracer = trace.get_tracer(_TRACER_NAME)
            with tracer.start_as_current_span(
                operation_name,
                attributes=_arg_attributes(arg_names, args, kwargs),
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _mark(span, e)
                    raise
                _mark(span, None)
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span (no-op when tracing is off)."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)


class TracedOperation:
    """Async context manager for a child span, e.g. one workflow action."""

    def __init__(self, operation_name: str, attributes: dict[str, Any] | None = None) -> None:
        self.operation_name = operation_name
        self.attributes = attributes or {}
        self._span_cm: Any = None
        self.span: trace.Span | None = None

    def set_attribute(self, key: str, value: str | int | float | bool) -> None:
        """Set an attribute on this operation's span (no-op before enter)."""
        if self.span is not None:
            self.span.set_attribute(key, value)

    async def __aenter__(self) -> "TracedOperation":
        tracer = trace.get_tracer(_TRACER_NAME)
        self._span_cm = tracer.start_as_current_span(
            self.operation_name,
            attributes=self.attributes,
            record_exception=False,
            set_status_on_exception=False,
        )
        self.span = self._span_cm.__enter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if self.span is None:
            return
        _mark(self.span, exc_val)
        self._span_cm.__exit__(exc_type, exc_val, exc_tb)
