"""DTOs for workflow-created tasks (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TaskResult:
    """Task created by the workflow create_task action."""

    id: str
    team_id: str
    deal_id: str | None
    created_by: str | None
    title: str
    description: str | None
    priority: str
    status: str
    due_date: datetime | None
    assigned_to: str | None
    created_at: datetime | None = None
