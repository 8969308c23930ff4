"""Shared utilities: enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.enums import (
    ActionOutcomeStatus,
    ActionType,
    ConditionOperator,
    DeliveryStatus,
    ExecutionStatus,
    TaskPriority,
    TaskStatus,
    TriggerType,
)
from app.shared.utils import generate_cuid, utc_now

__all__ = [
    "ActionOutcomeStatus",
    "ActionType",
    "ConditionOperator",
    "DeliveryStatus",
    "ExecutionStatus",
    "TaskPriority",
    "TaskStatus",
    "TriggerType",
    "generate_cuid",
    "utc_now",
]
