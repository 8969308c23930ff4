"""Domain entities."""

from app.domain.entities.workflow import (
    ExecutionHistoryEntry,
    WorkflowAction,
    WorkflowCondition,
    WorkflowEntity,
    WorkflowStats,
    WorkflowTrigger,
    append_history,
)

__all__ = [
    "ExecutionHistoryEntry",
    "WorkflowAction",
    "WorkflowCondition",
    "WorkflowEntity",
    "WorkflowStats",
    "WorkflowTrigger",
    "append_history",
]
