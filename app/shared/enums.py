"""Shared enumerations for the Deal Clarity service.

Closed sets used by the workflow engine, the persistence layer and the API
(trigger types, condition operators, action types, execution statuses).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TriggerType(_ValuesMixin, str, Enum):
    """Domain event that makes a workflow eligible for evaluation."""

    DEAL_CREATED = "deal_created"
    DEAL_UPDATED = "deal_updated"
    DEAL_STAGE_CHANGED = "deal_stage_changed"
    DEAL_AMOUNT_CHANGED = "deal_amount_changed"
    DEAL_CLOSED = "deal_closed"
    DEAL_DAYS_IN_STAGE = "deal_days_in_stage"
    CONTACT_CREATED = "contact_created"
    CONTACT_UPDATED = "contact_updated"
    CUSTOM_DATE = "custom_date"


class ConditionOperator(_ValuesMixin, str, Enum):
    """Operator of a single field/operator/value condition."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"


class ActionType(_ValuesMixin, str, Enum):
    """Side-effecting operation a workflow runs when its conditions pass."""

    SEND_EMAIL = "send_email"
    CREATE_TASK = "create_task"
    UPDATE_FIELD = "update_field"
    NOTIFY_USER = "notify_user"
    CHANGE_STAGE = "change_stage"
    ADD_TAG = "add_tag"
    WEBHOOK = "webhook"
    SLACK_NOTIFICATION = "slack_notification"


class ExecutionStatus(_ValuesMixin, str, Enum):
    """Run-level verdict stored in a workflow's execution history."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class ActionOutcomeStatus(_ValuesMixin, str, Enum):
    """Result of a single action attempt."""

    SUCCESS = "success"
    FAILED = "failed"


class DeliveryStatus(_ValuesMixin, str, Enum):
    """Best-effort delivery result of an outbound webhook/Slack call."""

    DELIVERED = "delivered"
    FAILED = "failed"


class TaskPriority(_ValuesMixin, str, Enum):
    """Priority of a task created by a workflow."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELED = "canceled"
