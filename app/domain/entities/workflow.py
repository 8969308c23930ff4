"""Workflow domain entity.

A workflow is a team-scoped automation rule: a trigger (event type + config),
AND-ed conditions, and ordered actions. Execution history and aggregate stats
live on the workflow itself.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.shared.enums import ExecutionStatus
from app.shared.utils.datetime import ensure_utc

DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True)
class WorkflowTrigger:
    """Trigger type plus opaque type-specific config (e.g. fromStage, days)."""

    type: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkflowCondition:
    """Single field/operator/value test. Operator is kept as stored (unknown ones fail closed)."""

    field: str
    operator: str
    value: Any = None


@dataclass(frozen=True)
class WorkflowAction:
    """Single action descriptor; config is validated by the executor per type."""

    type: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExecutionHistoryEntry:
    """One past run of a workflow against a record."""

    record_id: str
    executed_at: datetime
    status: ExecutionStatus
    actions_executed: int
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form used for storage."""
        data: dict[str, Any] = {
            "record_id": self.record_id,
            "executed_at": self.executed_at.isoformat(),
            "status": self.status.value,
            "actions_executed": self.actions_executed,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExecutionHistoryEntry":
        executed_at = data["executed_at"]
        if isinstance(executed_at, str):
            executed_at = datetime.fromisoformat(executed_at)
        return cls(
            record_id=data["record_id"],
            executed_at=ensure_utc(executed_at),  # type: ignore[arg-type]
            status=ExecutionStatus(data.get("status", ExecutionStatus.SUCCESS.value)),
            actions_executed=int(data.get("actions_executed", 0)),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class WorkflowStats:
    """Running counters; incremented on every recorded run, never reset."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    last_executed: datetime | None = None


def append_history(
    history: list[dict[str, Any]],
    entry: ExecutionHistoryEntry,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[dict[str, Any]]:
    """Return a new history list with entry appended, keeping only the latest `limit` entries."""
    updated = [*history, entry.to_dict()]
    if len(updated) > limit:
        updated = updated[-limit:]
    return updated


def _coerce_days(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class WorkflowEntity:
    """Domain entity for a workflow definition plus its run bookkeeping."""

    id: str
    team_id: str
    created_by: str | None
    name: str
    description: str | None
    enabled: bool
    trigger: WorkflowTrigger
    conditions: list[WorkflowCondition]
    actions: list[WorkflowAction]
    execution_history: list[ExecutionHistoryEntry] = field(default_factory=list)
    stats: WorkflowStats = field(default_factory=WorkflowStats)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def belongs_to_team(self, team_id: str) -> bool:
        """Return whether this workflow belongs to the given team."""
        return self.team_id == team_id

    def matches_trigger_context(self, context: dict[str, Any] | None) -> bool:
        """Check trigger config (fromStage, toStage, days) against facts about the event.

        Without a context nothing is filtered. fromStage and toStage are only
        checked when set and when the context carries the matching fact.
        """
        if not context:
            return True
        config = self.trigger.config or {}
        for key in ("fromStage", "toStage"):
            expected = config.get(key)
            if expected and key in context and context[key] != expected:
                return False
        if "daysInStage" in context:
            # A days-in-stage workflow without a days threshold never fires.
            days = _coerce_days(config.get("days"))
            if days is None or days != context["daysInStage"]:
                return False
        return True

    def recent_history(self, limit: int) -> list[ExecutionHistoryEntry]:
        """Return up to `limit` history entries, most recent first."""
        if limit <= 0:
            return []
        return list(reversed(self.execution_history[-limit:]))
