"""Workflow engine: run workflows triggered by deal events (implements IWorkflowEngine)."""

from __future__ import annotations

from typing import Any

from app.application.dtos.workflow import ActionOutcome, WorkflowHistory, WorkflowRunResult
from app.application.interfaces.repositories import IDealRepository, IWorkflowRepository
from app.application.interfaces.services import IActionExecutor
from app.application.services.condition_evaluator import evaluate_conditions
from app.domain.entities.workflow import DEFAULT_HISTORY_LIMIT, WorkflowEntity
from app.domain.exceptions import ConditionsNotMetException, ResourceNotFoundException
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

DEFAULT_HISTORY_PAGE = 50


class WorkflowEngine:
    """Finds and runs workflows for a deal (trigger, manual run, history)."""

    def __init__(
        self,
        workflow_repo: IWorkflowRepository,
        deal_repo: IDealRepository,
        action_executor: IActionExecutor,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        default_history_page: int = DEFAULT_HISTORY_PAGE,
    ) -> None:
        self.workflow_repo = workflow_repo
        self.deal_repo = deal_repo
        self.action_executor = action_executor
        self._history_limit = history_limit
        self._default_history_page = default_history_page

    @traced("workflow.trigger")
    async def trigger(
        self,
        trigger_type: str,
        record_id: str,
        team_id: str,
        context: dict[str, Any] | None = None,
    ) -> list[WorkflowRunResult]:
        """Run every enabled workflow of the team that listens to trigger_type.

        Workflows whose conditions do not hold are skipped without a history
        entry. A failure inside one workflow is logged and does not stop the
        others; nothing is raised to the caller.
        """
        try:
            record = await self.deal_repo.find(record_id)
            if record is None:
                logger.warning(
                    "Trigger %s for unknown deal %s (team_id=%s); nothing to run",
                    trigger_type,
                    record_id,
                    team_id,
                )
                return []
            workflows = await self.workflow_repo.find_many(
                team_id, trigger_type, enabled=True
            )
        except Exception:
            logger.exception(
                "Could not load deal %s or workflows for trigger %s (team_id=%s)",
                record_id,
                trigger_type,
                team_id,
            )
            return []

        results: list[WorkflowRunResult] = []
        for workflow in workflows:
            if not workflow.matches_trigger_context(context):
                continue
            try:
                if not evaluate_conditions(record, workflow.conditions):
                    continue
                results.append(await self._run(workflow, record))
            except Exception:
                logger.exception(
                    "Workflow %s failed for deal %s (team_id=%s, trigger=%s)",
                    workflow.id,
                    record_id,
                    team_id,
                    trigger_type,
                )
        add_span_attributes(**{"workflow.trigger": trigger_type, "workflow.runs": len(results)})
        return results

    @traced("workflow.execute_manually")
    async def execute_manually(self, workflow_id: str, record_id: str) -> WorkflowRunResult:
        """Run one workflow against one deal on demand, ignoring trigger type and enabled flag.

        Raises:
            ResourceNotFoundException: Workflow or deal missing, or the deal
                belongs to another team.
            ConditionsNotMetException: Conditions do not hold; nothing is run or recorded.
        """
        workflow = await self.workflow_repo.find_by_id(workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("Workflow", workflow_id)
        record = await self.deal_repo.find(record_id)
        if record is None or not workflow.belongs_to_team(str(record.get("teamId"))):
            raise ResourceNotFoundException("Deal", record_id)
        if not evaluate_conditions(record, workflow.conditions):
            raise ConditionsNotMetException(workflow_id, record_id)
        return await self._run(workflow, record)

    async def get_history(
        self, workflow_id: str, limit: int | None = None
    ) -> WorkflowHistory:
        """Return the most recent runs (newest first) and aggregate stats."""
        workflow = await self.workflow_repo.find_by_id(workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("Workflow", workflow_id)
        page = self._default_history_page if limit is None else limit
        page = max(1, min(page, self._history_limit))
        return WorkflowHistory(history=workflow.recent_history(page), stats=workflow.stats)

    async def _run(self, workflow: WorkflowEntity, record: dict[str, Any]) -> WorkflowRunResult:
        """Execute actions in order, then record stats and history."""
        record_id = str(record.get("id"))
        outcomes: list[ActionOutcome] = []
        for action in workflow.actions:
            outcomes.append(
                await self.action_executor.execute(action, record, workflow.team_id, workflow)
            )
        result = WorkflowRunResult(
            workflow_id=workflow.id,
            record_id=record_id,
            executed_at=utc_now(),
            outcomes=outcomes,
        )
        try:
            await self.workflow_repo.record_execution(
                workflow.id,
                result.history_entry(),
                result.succeeded_count,
                result.failed_count,
            )
        except Exception:
            logger.exception(
                "Could not record execution of workflow %s for deal %s",
                workflow.id,
                record_id,
            )
            return WorkflowRunResult(
                workflow_id=result.workflow_id,
                record_id=result.record_id,
                executed_at=result.executed_at,
                outcomes=outcomes,
                recorded=False,
            )
        logger.info(
            "Workflow %s ran on deal %s: %d succeeded, %d failed",
            workflow.id,
            record_id,
            result.succeeded_count,
            result.failed_count,
        )
        return result
