"""Deal events: derive workflow triggers from deal changes and run the days-in-stage sweep."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from app.application.dtos.workflow import StageAgeSweepResult, TriggerEvent, WorkflowRunResult
from app.core.constants import CLOSED_DEAL_STAGES
from app.shared.enums import TriggerType
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import parse_iso_datetime, utc_now, whole_days_between

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IDealRepository, IWorkflowRepository
    from app.application.interfaces.services import IWorkflowEngine

logger = get_logger(__name__)


def is_closed_stage(stage: Any) -> bool:
    """Return True for won/lost stages (case-insensitive)."""
    return isinstance(stage, str) and stage.strip().lower() in CLOSED_DEAL_STAGES


def detect_deal_triggers(
    before: dict[str, Any] | None, after: dict[str, Any]
) -> list[TriggerEvent]:
    """Map a deal change to the trigger events it raises, in firing order.

    before is None for a newly created deal.
    """
    if before is None:
        return [TriggerEvent(TriggerType.DEAL_CREATED.value)]
    events = [TriggerEvent(TriggerType.DEAL_UPDATED.value)]
    old_stage, new_stage = before.get("stage"), after.get("stage")
    if old_stage != new_stage:
        events.append(
            TriggerEvent(
                TriggerType.DEAL_STAGE_CHANGED.value,
                {"fromStage": old_stage, "toStage": new_stage},
            )
        )
    if before.get("amount") != after.get("amount"):
        events.append(TriggerEvent(TriggerType.DEAL_AMOUNT_CHANGED.value))
    if is_closed_stage(new_stage) and not is_closed_stage(old_stage):
        events.append(TriggerEvent(TriggerType.DEAL_CLOSED.value, {"toStage": new_stage}))
    return events


async def dispatch_deal_triggers(
    engine: IWorkflowEngine,
    record_id: str,
    team_id: str,
    events: list[TriggerEvent],
) -> list[WorkflowRunResult]:
    """Fire each trigger in order; later triggers see the effects of earlier runs."""
    results: list[WorkflowRunResult] = []
    for event in events:
        results.extend(
            await engine.trigger(event.trigger_type, record_id, team_id, event.context)
        )
    return results


def _days_thresholds(configs: list[dict[str, Any]]) -> list[int]:
    days: set[int] = set()
    for config in configs:
        try:
            value = int(config.get("days"))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            continue
        if value >= 0:
            days.add(value)
    return sorted(days)


async def run_stage_age_sweep(
    workflow_repo: IWorkflowRepository,
    deal_repo: IDealRepository,
    engine: IWorkflowEngine,
    *,
    now: datetime | None = None,
) -> StageAgeSweepResult:
    """Fire deal_days_in_stage for open deals whose whole days in stage equal a threshold.

    Meant to run once a day; running it twice on the same day fires twice.
    """
    now = now or utc_now()
    trigger_type = TriggerType.DEAL_DAYS_IN_STAGE.value
    teams = await workflow_repo.list_team_ids_with_trigger(trigger_type)
    deals_triggered = 0
    workflow_runs = 0
    for team_id in teams:
        workflows = await workflow_repo.find_many(team_id, trigger_type, enabled=True)
        for days in _days_thresholds([w.trigger.config for w in workflows]):
            candidates = await deal_repo.list_entered_stage_between(
                team_id,
                now - timedelta(days=days + 1),
                now - timedelta(days=days) + timedelta(microseconds=1),
            )
            for deal in candidates:
                entered = deal.get("stageChangedAt")
                if not entered or is_closed_stage(deal.get("stage")):
                    continue
                entered_at = (
                    entered if isinstance(entered, datetime) else parse_iso_datetime(entered)
                )
                if whole_days_between(entered_at, now) != days:
                    continue
                results = await engine.trigger(
                    trigger_type, deal["id"], team_id, {"daysInStage": days}
                )
                deals_triggered += 1
                workflow_runs += len(results)
    logger.info(
        "Stage age sweep: %d teams, %d deals triggered, %d workflow runs",
        len(teams),
        deals_triggered,
        workflow_runs,
    )
    return StageAgeSweepResult(
        teams_scanned=len(teams),
        deals_triggered=deals_triggered,
        workflow_runs=workflow_runs,
    )
