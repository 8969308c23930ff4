"""Task repository for the workflow create_task action."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.task import TaskResult
from app.infrastructure.persistence.models.task import Task
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.enums import TaskStatus


def _to_result(t: Task) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        team_id=t.team_id,
        deal_id=t.deal_id,
        created_by=t.created_by,
        title=t.title,
        description=t.description,
        priority=t.priority,
        status=t.status,
        due_date=t.due_date,
        assigned_to=t.assigned_to,
        created_at=t.created_at,
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def create(  # type: ignore[override]
        self,
        team_id: str,
        deal_id: str | None,
        title: str,
        *,
        created_by: str | None = None,
        description: str | None = None,
        priority: str = "medium",
        due_date: datetime | None = None,
        assigned_to: str | None = None,
    ) -> TaskResult:
        """Create an open task and return the result DTO."""
        task = Task(
            team_id=team_id,
            deal_id=deal_id,
            title=title,
            created_by=created_by,
            description=description,
            priority=priority,
            status=TaskStatus.OPEN.value,
            due_date=due_date,
            assigned_to=assigned_to,
        )
        return _to_result(await super().create(task))
