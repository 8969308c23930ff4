"""WorkflowEngine unit tests: triggering, manual runs, stats and capped history."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.workflow import ActionOutcome
from app.domain.entities.workflow import ExecutionHistoryEntry
from app.domain.exceptions import ConditionsNotMetException, ResourceNotFoundException
from app.infrastructure.services.workflow_action_executor import WorkflowActionExecutor
from app.infrastructure.services.workflow_engine import WorkflowEngine
from app.shared.enums import ExecutionStatus
from tests.fakes import (
    OTHER_TEAM_ID,
    TEAM_ID,
    InMemoryDealRepository,
    InMemoryTaskRepository,
    InMemoryWorkflowRepository,
    RecordingHttpDispatcher,
    RecordingMailSender,
    RecordingNotificationService,
    make_deal,
    make_workflow,
)

BIG_DEAL_CONDITION = {"field": "amount", "operator": "greater_than", "value": 10000}


def _engine(deal_repo, workflow_repo, executor=None) -> WorkflowEngine:
    executor = executor or WorkflowActionExecutor(
        deal_repo,
        InMemoryTaskRepository(),
        mail_sender=RecordingMailSender(),
        notification_service=RecordingNotificationService(),
        http_dispatcher=RecordingHttpDispatcher(),
    )
    return WorkflowEngine(workflow_repo, deal_repo, executor)


async def test_trigger_runs_matching_workflow_and_records_stats() -> None:
    """Big-deal workflow tags a 50k deal and records one successful run."""
    workflow = make_workflow(
        conditions=[BIG_DEAL_CONDITION],
        actions=[{"type": "add_tag", "config": {"tag": "big-deal"}}],
    )
    deals = InMemoryDealRepository(make_deal(amount=50000))
    workflows = InMemoryWorkflowRepository(workflow)
    results = await _engine(deals, workflows).trigger("deal_updated", "deal-1", TEAM_ID)

    assert len(results) == 1
    assert results[0].status == ExecutionStatus.SUCCESS
    assert deals.deals["deal-1"]["tags"] == ["big-deal"]
    assert workflow.stats.total_executions == 1
    assert workflow.stats.successful_executions == 1
    assert workflow.stats.failed_executions == 0
    assert workflow.execution_history[0].record_id == "deal-1"


async def test_trigger_skips_workflow_when_conditions_fail() -> None:
    """A 5k deal does not match; nothing runs and no history is written."""
    workflow = make_workflow(
        conditions=[BIG_DEAL_CONDITION],
        actions=[{"type": "add_tag", "config": {"tag": "big-deal"}}],
    )
    deals = InMemoryDealRepository(make_deal(amount=5000))
    results = await _engine(deals, InMemoryWorkflowRepository(workflow)).trigger(
        "deal_updated", "deal-1", TEAM_ID
    )
    assert results == []
    assert workflow.execution_history == []
    assert workflow.stats.total_executions == 0


async def test_partial_failure_counts_each_action() -> None:
    """Later actions still run after a failure; counters add per action."""
    workflow = make_workflow(
        actions=[
            {"type": "add_tag", "config": {"tag": "reviewed"}},
            {"type": "send_email", "config": {"subject": "s", "template": "t"}},
            {"type": "update_field", "config": {"field": "probability", "value": 90}},
        ]
    )
    deals = InMemoryDealRepository(make_deal())
    results = await _engine(deals, InMemoryWorkflowRepository(workflow)).trigger(
        "deal_updated", "deal-1", TEAM_ID
    )
    outcomes = results[0].outcomes
    assert [o.succeeded for o in outcomes] == [True, False, True]
    assert deals.deals["deal-1"]["probability"] == 90
    assert workflow.stats.total_executions == 1
    assert workflow.stats.successful_executions == 2
    assert workflow.stats.failed_executions == 1
    entry = workflow.execution_history[-1]
    assert entry.status == ExecutionStatus.FAILED
    assert entry.actions_executed == 3


async def test_trigger_ignores_other_teams_and_disabled_workflows() -> None:
    ours = make_workflow("wf-ours", actions=[{"type": "add_tag", "config": {"tag": "a"}}])
    theirs = make_workflow("wf-theirs", team_id=OTHER_TEAM_ID)
    disabled = make_workflow("wf-off", enabled=False)
    other_trigger = make_workflow("wf-created", trigger_type="deal_created")
    workflows = InMemoryWorkflowRepository(ours, theirs, disabled, other_trigger)
    results = await _engine(InMemoryDealRepository(make_deal()), workflows).trigger(
        "deal_updated", "deal-1", TEAM_ID
    )
    assert [r.workflow_id for r in results] == ["wf-ours"]


async def test_trigger_context_filters_stage_changes() -> None:
    to_won = make_workflow(
        "wf-won", trigger_type="deal_stage_changed", trigger_config={"toStage": "Won"}
    )
    any_stage = make_workflow("wf-any", trigger_type="deal_stage_changed")
    engine = _engine(
        InMemoryDealRepository(make_deal(stage="Lost")),
        InMemoryWorkflowRepository(to_won, any_stage),
    )
    results = await engine.trigger(
        "deal_stage_changed",
        "deal-1",
        TEAM_ID,
        {"fromStage": "Proposal", "toStage": "Lost"},
    )
    assert [r.workflow_id for r in results] == ["wf-any"]


async def test_one_failing_workflow_does_not_stop_the_others() -> None:
    first = make_workflow("wf-1", actions=[{"type": "add_tag", "config": {"tag": "a"}}])
    second = make_workflow("wf-2", actions=[{"type": "add_tag", "config": {"tag": "b"}}])
    executor = AsyncMock()
    executor.execute = AsyncMock(
        side_effect=[RuntimeError("boom"), ActionOutcome.success("add_tag", {"tag": "b"})]
    )
    workflows = InMemoryWorkflowRepository(first, second)
    results = await _engine(InMemoryDealRepository(make_deal()), workflows, executor).trigger(
        "deal_updated", "deal-1", TEAM_ID
    )
    assert [r.workflow_id for r in results] == ["wf-2"]
    assert first.stats.total_executions == 0
    assert second.stats.total_executions == 1


async def test_rejected_field_value_does_not_fail_next_workflow() -> None:
    first = make_workflow(
        "wf-1", actions=[{"type": "update_field", "config": {"field": "amount", "value": "abc"}}]
    )
    second = make_workflow("wf-2", actions=[{"type": "add_tag", "config": {"tag": "hot"}}])
    deals = InMemoryDealRepository(make_deal(amount=50000))
    results = await _engine(deals, InMemoryWorkflowRepository(first, second)).trigger(
        "deal_updated", "deal-1", TEAM_ID
    )

    assert [r.status for r in results] == [ExecutionStatus.FAILED, ExecutionStatus.SUCCESS]
    assert deals.deals["deal-1"]["amount"] == 50000
    assert deals.deals["deal-1"]["tags"] == ["hot"]


async def test_trigger_for_missing_deal_returns_empty() -> None:
    workflow = make_workflow(actions=[{"type": "add_tag", "config": {"tag": "a"}}])
    results = await _engine(
        InMemoryDealRepository(), InMemoryWorkflowRepository(workflow)
    ).trigger("deal_updated", "deal-404", TEAM_ID)
    assert results == []


async def test_recording_failure_is_reported_not_raised() -> None:
    workflow = make_workflow(actions=[{"type": "add_tag", "config": {"tag": "a"}}])
    workflows = InMemoryWorkflowRepository(workflow)
    workflows.fail_recording_for.add("wf-1")
    results = await _engine(InMemoryDealRepository(make_deal()), workflows).trigger(
        "deal_updated", "deal-1", TEAM_ID
    )
    assert len(results) == 1
    assert results[0].recorded is False


async def test_history_keeps_latest_hundred_entries() -> None:
    """The 101st run drops the oldest entry; stats keep counting."""
    workflow = make_workflow(actions=[{"type": "add_tag", "config": {"tag": "a"}}])
    start = datetime(2026, 1, 1, tzinfo=UTC)
    workflow.execution_history = [
        ExecutionHistoryEntry(
            record_id=f"old-{i}",
            executed_at=start + timedelta(minutes=i),
            status=ExecutionStatus.SUCCESS,
            actions_executed=1,
        )
        for i in range(100)
    ]
    engine = _engine(InMemoryDealRepository(make_deal()), InMemoryWorkflowRepository(workflow))
    await engine.trigger("deal_updated", "deal-1", TEAM_ID)

    assert len(workflow.execution_history) == 100
    assert workflow.execution_history[0].record_id == "old-1"
    assert workflow.execution_history[-1].record_id == "deal-1"

    history = await engine.get_history("wf-1")
    assert len(history.history) == 50
    assert history.history[0].record_id == "deal-1"
    assert history.stats.total_executions == 1


async def test_get_history_clamps_limit() -> None:
    workflow = make_workflow()
    workflow.execution_history = [
        ExecutionHistoryEntry(
            record_id=f"r{i}",
            executed_at=datetime(2026, 1, 1, tzinfo=UTC),
            status=ExecutionStatus.SUCCESS,
            actions_executed=0,
        )
        for i in range(3)
    ]
    engine = _engine(InMemoryDealRepository(), InMemoryWorkflowRepository(workflow))
    assert [e.record_id for e in (await engine.get_history("wf-1", 2)).history] == ["r2", "r1"]
    assert len((await engine.get_history("wf-1", 0)).history) == 1
    with pytest.raises(ResourceNotFoundException):
        await engine.get_history("missing")


async def test_execute_manually_runs_disabled_workflow() -> None:
    workflow = make_workflow(
        enabled=False, actions=[{"type": "change_stage", "config": {"newStage": "Won"}}]
    )
    deals = InMemoryDealRepository(make_deal())
    result = await _engine(deals, InMemoryWorkflowRepository(workflow)).execute_manually(
        "wf-1", "deal-1"
    )
    assert result.outcomes[0].succeeded
    assert deals.deals["deal-1"]["stage"] == "Won"
    assert workflow.stats.total_executions == 1


async def test_execute_manually_rejects_unmet_conditions() -> None:
    workflow = make_workflow(
        conditions=[BIG_DEAL_CONDITION], actions=[{"type": "add_tag", "config": {"tag": "a"}}]
    )
    engine = _engine(
        InMemoryDealRepository(make_deal(amount=100)), InMemoryWorkflowRepository(workflow)
    )
    with pytest.raises(ConditionsNotMetException):
        await engine.execute_manually("wf-1", "deal-1")
    assert workflow.stats.total_executions == 0
    assert workflow.execution_history == []


async def test_execute_manually_missing_workflow_or_deal() -> None:
    workflow = make_workflow()
    engine = _engine(
        InMemoryDealRepository(make_deal(), make_deal("deal-other", team_id=OTHER_TEAM_ID)),
        InMemoryWorkflowRepository(workflow),
    )
    with pytest.raises(ResourceNotFoundException):
        await engine.execute_manually("wf-missing", "deal-1")
    with pytest.raises(ResourceNotFoundException):
        await engine.execute_manually("wf-1", "deal-missing")
    with pytest.raises(ResourceNotFoundException):
        await engine.execute_manually("wf-1", "deal-other")
