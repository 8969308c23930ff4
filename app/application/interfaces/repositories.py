"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
Deals are exchanged as JSON-like documents (dicts) so workflow conditions and
actions can address arbitrary nested fields by dot path.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.task import TaskResult
    from app.domain.entities.workflow import ExecutionHistoryEntry, WorkflowEntity


class IDealRepository(Protocol):
    """Protocol for the deal (record) store."""

    async def find(self, record_id: str) -> dict[str, Any] | None:
        """Return the deal document by id, or None."""

    async def save(self, record: dict[str, Any]) -> None:
        """Persist the whole deal document (last write wins)."""

    async def create(
        self, team_id: str, user_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a deal from a document and return the stored document."""

    async def update_fields(
        self, record_id: str, fields: dict[str, Any]
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Merge fields into the stored deal; return the (before, after) documents."""

    async def list_entered_stage_between(
        self, team_id: str, start: datetime, end: datetime
    ) -> list[dict[str, Any]]:
        """Return team deals whose current stage was entered in [start, end)."""

    async def commit(self) -> None:
        """Make pending deal writes visible to other sessions."""


class IWorkflowRepository(Protocol):
    """Protocol for the workflow store."""

    async def find_many(
        self, team_id: str, trigger_type: str, *, enabled: bool = True
    ) -> list[WorkflowEntity]:
        """Return team workflows for the trigger type with the given enabled flag."""

    async def find_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        """Return a workflow by id, or None."""

    async def record_execution(
        self,
        workflow_id: str,
        entry: ExecutionHistoryEntry,
        succeeded: int,
        failed: int,
    ) -> None:
        """Apply one run to stats (atomic increments) and append to the capped history."""

    async def list_by_team(self, team_id: str) -> list[WorkflowEntity]:
        """Return all workflows of a team, newest first."""

    async def create_workflow(
        self,
        team_id: str,
        created_by: str | None,
        name: str,
        trigger: dict[str, Any],
        *,
        description: str | None = None,
        enabled: bool = True,
        conditions: list[dict[str, Any]] | None = None,
        actions: list[dict[str, Any]] | None = None,
    ) -> WorkflowEntity:
        """Create a workflow and return it."""

    async def update_workflow(
        self, workflow_id: str, changes: dict[str, Any]
    ) -> WorkflowEntity | None:
        """Apply definition changes (name, description, enabled, trigger, conditions, actions)."""

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Delete a workflow; return False if it did not exist."""

    async def list_team_ids_with_trigger(self, trigger_type: str) -> list[str]:
        """Return ids of teams that have enabled workflows for the trigger type."""


class ITaskRepository(Protocol):
    """Protocol for the task store (create_task action)."""

    async def create(
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
        """Create a task linked to a deal and team."""
