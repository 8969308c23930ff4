"""Logging setup, OpenTelemetry configuration and the workflow span helpers."""

from app.shared.telemetry.logging import get_logger, setup_logging
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry
from app.shared.telemetry.tracing import TracedOperation, add_span_attributes, traced

__all__ = [
    "TelemetryConfig",
    "TracedOperation",
    "add_span_attributes",
    "get_logger",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
