"""Workflow API schemas.

Trigger, condition and action payloads are validated here and stored as plain
maps. Action config keys keep their wire names (e.g. webhookUrl, newStage).
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.application.dtos.workflow import ActionOutcome, WorkflowHistory
from app.domain.entities.workflow import (
    ExecutionHistoryEntry,
    WorkflowEntity,
    WorkflowStats,
)
from app.shared.enums import ConditionOperator, TaskPriority, TriggerType

# ---- Trigger and conditions ----


class TriggerRequest(BaseModel):
    """Trigger type plus type-specific config (fromStage/toStage, days)."""

    type: TriggerType
    config: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_config(self) -> "TriggerRequest":
        if self.type is TriggerType.DEAL_DAYS_IN_STAGE:
            days = self.config.get("days")
            if isinstance(days, bool) or not isinstance(days, int) or days < 0:
                raise ValueError("deal_days_in_stage requires config.days (integer >= 0)")
        for key in ("fromStage", "toStage"):
            value = self.config.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"trigger config.{key} must be a string")
        return self


class ConditionRequest(BaseModel):
    """Single condition: dot-path field, operator, comparison value."""

    field: str = Field(..., min_length=1, max_length=255, pattern=r"^[^.]+(\.[^.]+)*$")
    operator: ConditionOperator
    value: Any = None


# ---- Action configs (one model per action type) ----


class _ActionConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class SendEmailConfig(_ActionConfig):
    to: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    template: str = Field(..., min_length=1)
    variables: dict[str, Any] | None = None


class CreateTaskConfig(_ActionConfig):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = Field(default=None, alias="dueDate")
    assigned_to: str | None = Field(default=None, alias="assignedTo")


class UpdateFieldConfig(_ActionConfig):
    field: str = Field(..., min_length=1, pattern=r"^[^.]+(\.[^.]+)*$")
    value: Any

    @field_validator("field")
    @classmethod
    def reject_identity_fields(cls, v: str) -> str:
        if v.split(".")[0] in {"id", "teamId"}:
            raise ValueError(f"Field cannot be updated: {v}")
        return v


class NotifyUserConfig(_ActionConfig):
    user_id: str = Field(..., min_length=1, alias="userId")
    title: str = Field(..., min_length=1)
    message: str = ""


class ChangeStageConfig(_ActionConfig):
    new_stage: str = Field(..., min_length=1, alias="newStage")


class AddTagConfig(_ActionConfig):
    tag: str = Field(..., min_length=1, max_length=100)


class SlackNotificationConfig(_ActionConfig):
    webhook_url: str = Field(..., pattern=r"^https?://", alias="webhookUrl")
    message: str = Field(..., min_length=1)


class WebhookConfig(_ActionConfig):
    url: str = Field(..., pattern=r"^https?://")
    method: Literal["POST", "PUT", "PATCH"] = "POST"
    payload: dict[str, Any] | None = None
    headers: dict[str, str] | None = None

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class SendEmailAction(BaseModel):
    type: Literal["send_email"]
    config: SendEmailConfig


class CreateTaskAction(BaseModel):
    type: Literal["create_task"]
    config: CreateTaskConfig


class UpdateFieldAction(BaseModel):
    type: Literal["update_field"]
    config: UpdateFieldConfig


class NotifyUserAction(BaseModel):
    type: Literal["notify_user"]
    config: NotifyUserConfig


class ChangeStageAction(BaseModel):
    type: Literal["change_stage"]
    config: ChangeStageConfig


class AddTagAction(BaseModel):
    type: Literal["add_tag"]
    config: AddTagConfig


class SlackNotificationAction(BaseModel):
    type: Literal["slack_notification"]
    config: SlackNotificationConfig


class WebhookAction(BaseModel):
    type: Literal["webhook"]
    config: WebhookConfig


ActionRequest = Annotated[
    SendEmailAction
    | CreateTaskAction
    | UpdateFieldAction
    | NotifyUserAction
    | ChangeStageAction
    | AddTagAction
    | SlackNotificationAction
    | WebhookAction,
    Field(discriminator="type"),
]


def action_to_map(action: BaseModel) -> dict[str, Any]:
    """Stored form of a validated action: {type, config} with wire key names."""
    return action.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _strip_name(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


# ---- Requests ----


class WorkflowCreateRequest(BaseModel):
    """Request body for creating a workflow."""

    team_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    enabled: bool = True
    trigger: TriggerRequest
    conditions: list[ConditionRequest] = Field(default_factory=list)
    actions: list[ActionRequest] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        """Trim before length checks so a blank name is rejected."""
        return _strip_name(v)


class WorkflowUpdateRequest(BaseModel):
    """Request body for updating a workflow (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    enabled: bool | None = None
    trigger: TriggerRequest | None = None
    conditions: list[ConditionRequest] | None = None
    actions: list[ActionRequest] | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return _strip_name(v)

    def to_changes(self) -> dict[str, Any]:
        """Explicitly set fields as storable maps (unset fields are left alone)."""
        changes: dict[str, Any] = {}
        for key in self.model_fields_set:
            value = getattr(self, key)
            if key in ("name", "enabled", "trigger") and value is None:
                continue
            if key == "trigger":
                changes[key] = value.model_dump(mode="json")
            elif key == "conditions":
                changes[key] = [c.model_dump(mode="json") for c in value or []]
            elif key == "actions":
                changes[key] = [action_to_map(a) for a in value or []]
            else:
                changes[key] = value
        return changes


# ---- Responses ----


class TriggerResponse(BaseModel):
    type: str
    config: dict[str, Any]


class ConditionResponse(BaseModel):
    field: str
    operator: str
    value: Any = None


class ActionResponse(BaseModel):
    type: str
    config: dict[str, Any]


class WorkflowStatsResponse(BaseModel):
    """Aggregate run counters."""

    model_config = ConfigDict(from_attributes=True)

    total_executions: int
    successful_executions: int
    failed_executions: int
    last_executed: datetime | None = None


class ExecutionHistoryEntryResponse(BaseModel):
    """One recorded run."""

    model_config = ConfigDict(from_attributes=True)

    record_id: str
    executed_at: datetime
    status: str
    actions_executed: int
    error: str | None = None

    @classmethod
    def from_entry(cls, entry: ExecutionHistoryEntry) -> "ExecutionHistoryEntryResponse":
        return cls(
            record_id=entry.record_id,
            executed_at=entry.executed_at,
            status=entry.status.value,
            actions_executed=entry.actions_executed,
            error=entry.error,
        )


class WorkflowResponse(BaseModel):
    """Workflow response (definition plus stats; history is served separately)."""

    id: str
    team_id: str
    created_by: str | None
    name: str
    description: str | None
    enabled: bool
    trigger: TriggerResponse
    conditions: list[ConditionResponse]
    actions: list[ActionResponse]
    stats: WorkflowStatsResponse
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, workflow: WorkflowEntity) -> "WorkflowResponse":
        return cls(
            id=workflow.id,
            team_id=workflow.team_id,
            created_by=workflow.created_by,
            name=workflow.name,
            description=workflow.description,
            enabled=workflow.enabled,
            trigger=TriggerResponse(type=workflow.trigger.type, config=workflow.trigger.config),
            conditions=[
                ConditionResponse(field=c.field, operator=c.operator, value=c.value)
                for c in workflow.conditions
            ],
            actions=[ActionResponse(type=a.type, config=a.config) for a in workflow.actions],
            stats=_stats_response(workflow.stats),
            created_at=workflow.created_at,
            updated_at=workflow.updated_at,
        )


def _stats_response(stats: WorkflowStats) -> WorkflowStatsResponse:
    return WorkflowStatsResponse.model_validate(stats)


class WorkflowHistoryResponse(BaseModel):
    """Recent runs (most recent first) plus aggregate stats."""

    history: list[ExecutionHistoryEntryResponse]
    stats: WorkflowStatsResponse

    @classmethod
    def from_history(cls, history: WorkflowHistory) -> "WorkflowHistoryResponse":
        return cls(
            history=[ExecutionHistoryEntryResponse.from_entry(e) for e in history.history],
            stats=_stats_response(history.stats),
        )


class ActionOutcomeResponse(BaseModel):
    """Per-action result of a manual run."""

    type: str
    status: str
    result: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: ActionOutcome) -> "ActionOutcomeResponse":
        return cls(
            type=outcome.type,
            status=outcome.status.value,
            result=outcome.result if outcome.succeeded else None,
            error=outcome.error,
        )


class WorkflowExecuteResponse(BaseModel):
    """Response for a manual run."""

    message: str = "Workflow executed"
    results: list[ActionOutcomeResponse]


class CatalogEntryResponse(BaseModel):
    """Trigger or action descriptor with config field hints for the UI."""

    id: str
    name: str
    description: str
    config: dict[str, Any] | None = None


class MessageResponse(BaseModel):
    message: str
