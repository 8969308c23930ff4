"""Workflow repository: definitions, atomic run stats and the capped execution history."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities.workflow import (
    DEFAULT_HISTORY_LIMIT,
    ExecutionHistoryEntry,
    WorkflowAction,
    WorkflowCondition,
    WorkflowEntity,
    WorkflowStats,
    WorkflowTrigger,
    append_history,
)
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.persistence.models.workflow import Workflow
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_DEFINITION_FIELDS = frozenset({"name", "description", "enabled", "conditions", "actions"})


def _history_entries(workflow: Workflow) -> list[ExecutionHistoryEntry]:
    entries: list[ExecutionHistoryEntry] = []
    for raw in workflow.execution_history or []:
        try:
            entries.append(ExecutionHistoryEntry.from_dict(raw))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed history entry on workflow %s", workflow.id)
    return entries


def to_entity(workflow: Workflow) -> WorkflowEntity:
    """Map Workflow ORM to the domain entity."""
    return WorkflowEntity(
        id=workflow.id,
        team_id=workflow.team_id,
        created_by=workflow.created_by,
        name=workflow.name,
        description=workflow.description,
        enabled=workflow.enabled,
        trigger=WorkflowTrigger(
            type=workflow.trigger_type, config=dict(workflow.trigger_config or {})
        ),
        conditions=[
            WorkflowCondition(
                field=str(c.get("field", "")),
                operator=str(c.get("operator", "")),
                value=c.get("value"),
            )
            for c in workflow.conditions or []
        ],
        actions=[
            WorkflowAction(type=str(a.get("type", "")), config=dict(a.get("config") or {}))
            for a in workflow.actions or []
        ],
        execution_history=_history_entries(workflow),
        stats=WorkflowStats(
            total_executions=workflow.total_executions or 0,
            successful_executions=workflow.successful_executions or 0,
            failed_executions=workflow.failed_executions or 0,
            last_executed=workflow.last_executed,
        ),
        created_at=workflow.created_at,
        updated_at=workflow.updated_at,
    )


class WorkflowRepository(BaseRepository[Workflow]):
    """Workflow repository. Implements IWorkflowRepository."""

    def __init__(
        self, db: AsyncSession, *, history_limit: int = DEFAULT_HISTORY_LIMIT
    ) -> None:
        super().__init__(db, Workflow)
        self._history_limit = history_limit

    async def _get_fresh(self, workflow_id: str) -> Workflow | None:
        # Counters are updated with Core statements; bypass stale identity-map state.
        result = await self.db.execute(
            select(Workflow)
            .where(Workflow.id == workflow_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, workflow_id: str) -> WorkflowEntity | None:
        workflow = await self._get_fresh(workflow_id)
        return to_entity(workflow) if workflow else None

    async def find_many(
        self, team_id: str, trigger_type: str, *, enabled: bool = True
    ) -> list[WorkflowEntity]:
        result = await self.db.execute(
            select(Workflow)
            .where(
                Workflow.team_id == team_id,
                Workflow.trigger_type == trigger_type,
                Workflow.enabled.is_(enabled),
            )
            .order_by(Workflow.created_at.asc(), Workflow.id.asc())
            .execution_options(populate_existing=True)
        )
        return [to_entity(w) for w in result.scalars().all()]

    async def list_by_team(self, team_id: str) -> list[WorkflowEntity]:
        result = await self.db.execute(
            select(Workflow)
            .where(Workflow.team_id == team_id)
            .order_by(Workflow.created_at.desc(), Workflow.id.desc())
            .execution_options(populate_existing=True)
        )
        return [to_entity(w) for w in result.scalars().all()]

    async def list_team_ids_with_trigger(self, trigger_type: str) -> list[str]:
        result = await self.db.execute(
            select(Workflow.team_id)
            .where(Workflow.trigger_type == trigger_type, Workflow.enabled.is_(True))
            .distinct()
            .order_by(Workflow.team_id)
        )
        return list(result.scalars().all())

    async def record_execution(
        self,
        workflow_id: str,
        entry: ExecutionHistoryEntry,
        succeeded: int,
        failed: int,
    ) -> None:
        """Apply one run: increment counters in SQL and append to the capped history.

        The row is locked (FOR UPDATE) before the read-modify-write of the
        history list, so concurrent runs of one workflow never lose entries.
        """
        async with self.db.begin_nested():
            result = await self.db.execute(
                select(Workflow.execution_history)
                .where(Workflow.id == workflow_id)
                .with_for_update()
            )
            row = result.one_or_none()
            if row is None:
                raise ResourceNotFoundException("Workflow", workflow_id)
            history = append_history(list(row[0] or []), entry, self._history_limit)
            await self.db.execute(
                update(Workflow)
                .where(Workflow.id == workflow_id)
                .values(
                    total_executions=Workflow.total_executions + 1,
                    successful_executions=Workflow.successful_executions + succeeded,
                    failed_executions=Workflow.failed_executions + failed,
                    last_executed=entry.executed_at,
                    execution_history=history,
                )
                .execution_options(synchronize_session=False)
            )

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
        """Create workflow; return created entity."""
        workflow = Workflow(
            team_id=team_id,
            created_by=created_by,
            name=name,
            description=description,
            enabled=enabled,
            trigger_type=trigger["type"],
            trigger_config=dict(trigger.get("config") or {}),
            conditions=list(conditions or []),
            actions=list(actions or []),
            execution_history=[],
        )
        return to_entity(await self.create(workflow))

    async def update_workflow(
        self, workflow_id: str, changes: dict[str, Any]
    ) -> WorkflowEntity | None:
        workflow = await self._get_fresh(workflow_id)
        if workflow is None:
            return None
        values = {k: v for k, v in changes.items() if k in _DEFINITION_FIELDS}
        if "trigger" in changes:
            values["trigger_type"] = changes["trigger"]["type"]
            values["trigger_config"] = dict(changes["trigger"].get("config") or {})
        return to_entity(await self.update(workflow, values))

    async def delete_workflow(self, workflow_id: str) -> bool:
        workflow = await self.get_by_id(workflow_id)
        if workflow is None:
            return False
        await self.delete(workflow)
        return True
