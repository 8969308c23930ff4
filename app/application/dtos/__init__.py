"""Application DTOs (no ORM dependency)."""

from app.application.dtos.task import TaskResult
from app.application.dtos.user import CurrentUser
from app.application.dtos.workflow import (
    ActionOutcome,
    DeliveryReport,
    StageAgeSweepResult,
    TriggerEvent,
    WorkflowHistory,
    WorkflowRunResult,
)

__all__ = [
    "ActionOutcome",
    "CurrentUser",
    "DeliveryReport",
    "StageAgeSweepResult",
    "TaskResult",
    "TriggerEvent",
    "WorkflowHistory",
    "WorkflowRunResult",
]
