"""Workflow entity rules: trigger context matching, history cap, history (de)serialization."""

from datetime import UTC, datetime

from app.domain.entities.workflow import ExecutionHistoryEntry, append_history
from app.shared.enums import ExecutionStatus
from tests.fakes import make_workflow


def _entry(record_id: str) -> ExecutionHistoryEntry:
    return ExecutionHistoryEntry(
        record_id=record_id,
        executed_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        status=ExecutionStatus.SUCCESS,
        actions_executed=2,
    )


def test_no_context_matches_everything() -> None:
    workflow = make_workflow(trigger_config={"toStage": "Won"})
    assert workflow.matches_trigger_context(None) is True


def test_from_and_to_stage_checked_when_configured() -> None:
    workflow = make_workflow(
        trigger_type="deal_stage_changed",
        trigger_config={"fromStage": "Proposal", "toStage": "Won"},
    )
    assert workflow.matches_trigger_context({"fromStage": "Proposal", "toStage": "Won"})
    assert not workflow.matches_trigger_context({"fromStage": "Lead", "toStage": "Won"})
    assert not workflow.matches_trigger_context({"fromStage": "Proposal", "toStage": "Lost"})


def test_days_in_stage_requires_equal_threshold() -> None:
    seven = make_workflow(trigger_type="deal_days_in_stage", trigger_config={"days": 7})
    unset = make_workflow(trigger_type="deal_days_in_stage")
    assert seven.matches_trigger_context({"daysInStage": 7})
    assert not seven.matches_trigger_context({"daysInStage": 6})
    assert not unset.matches_trigger_context({"daysInStage": 7})


def test_append_history_caps_to_limit() -> None:
    history = [_entry(f"r{i}").to_dict() for i in range(3)]
    updated = append_history(history, _entry("r3"), limit=3)
    assert [e["record_id"] for e in updated] == ["r1", "r2", "r3"]
    assert len(history) == 3


def test_history_entry_round_trips_through_storage_form() -> None:
    entry = _entry("deal-1")
    restored = ExecutionHistoryEntry.from_dict(entry.to_dict())
    assert restored == entry


def test_history_entry_naive_timestamp_is_utc() -> None:
    restored = ExecutionHistoryEntry.from_dict(
        {"record_id": "d", "executed_at": "2026-03-01T12:00:00", "actions_executed": 1}
    )
    assert restored.executed_at.tzinfo is not None
    assert restored.status == ExecutionStatus.SUCCESS


def test_recent_history_is_newest_first() -> None:
    workflow = make_workflow()
    workflow.execution_history = [_entry("a"), _entry("b"), _entry("c")]
    assert [e.record_id for e in workflow.recent_history(2)] == ["c", "b"]
    assert workflow.recent_history(0) == []
