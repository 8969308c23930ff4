"""DTOs for workflow runs: per-action outcomes, run results, history pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.entities.workflow import ExecutionHistoryEntry, WorkflowStats
from app.shared.enums import ActionOutcomeStatus, DeliveryStatus, ExecutionStatus


@dataclass(frozen=True)
class DeliveryReport:
    """Best-effort result of an outbound webhook/Slack call (never fails the action)."""

    status: DeliveryStatus
    status_code: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value}
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class ActionOutcome:
    """Structured result of one action: success with a result map, or failure with an error."""

    type: str
    status: ActionOutcomeStatus
    result: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def success(cls, action_type: str, result: dict[str, Any]) -> ActionOutcome:
        return cls(type=action_type, status=ActionOutcomeStatus.SUCCESS, result=result)

    @classmethod
    def failure(cls, action_type: str, error: str) -> ActionOutcome:
        return cls(type=action_type, status=ActionOutcomeStatus.FAILED, error=error)

    @property
    def succeeded(self) -> bool:
        return self.status is ActionOutcomeStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "status": self.status.value}
        if self.succeeded:
            data["result"] = self.result or {}
        else:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class WorkflowRunResult:
    """One workflow executed against one record (automatic or manual)."""

    workflow_id: str
    record_id: str
    executed_at: datetime
    outcomes: list[ActionOutcome] = field(default_factory=list)
    recorded: bool = True

    @property
    def succeeded_count(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)

    @property
    def status(self) -> ExecutionStatus:
        """Run-level verdict: failed if any action failed."""
        return ExecutionStatus.FAILED if self.failed_count else ExecutionStatus.SUCCESS

    def history_entry(self) -> ExecutionHistoryEntry:
        return ExecutionHistoryEntry(
            record_id=self.record_id,
            executed_at=self.executed_at,
            status=self.status,
            actions_executed=len(self.outcomes),
        )


@dataclass(frozen=True)
class WorkflowHistory:
    """History page (most recent first) plus aggregate stats."""

    history: list[ExecutionHistoryEntry]
    stats: WorkflowStats


@dataclass(frozen=True)
class TriggerEvent:
    """A trigger raised by a deal change, with optional context for trigger-config matching."""

    trigger_type: str
    context: dict[str, Any] | None = None


@dataclass(frozen=True)
class StageAgeSweepResult:
    """Summary of one days-in-stage sweep."""

    teams_scanned: int = 0
    deals_triggered: int = 0
    workflow_runs: int = 0
