"""Core constants: workflow catalogs and shared literal values.

Single source of truth for the trigger/action catalogs served to the
workflow builder UI and for deal stage vocabulary used by trigger detection.
"""

from typing import Any, Final

from app.shared.enums import ActionType, TriggerType

# Pipeline stages offered by the workflow builder.
DEAL_STAGES: Final[tuple[str, ...]] = (
    "Lead",
    "Qualified",
    "Proposal",
    "Negotiation",
    "Won",
    "Lost",
)

# Stages that close a deal (compared case-insensitively).
CLOSED_DEAL_STAGES: Final[frozenset[str]] = frozenset(
    {"won", "lost", "closed_won", "closed_lost", "closed won", "closed lost"}
)

# Built-in template variables available to send_email / slack / webhook actions.
DEAL_TEMPLATE_VARIABLES: Final[tuple[str, ...]] = (
    "dealName",
    "dealAmount",
    "dealStage",
    "dealProbability",
    "dealCloseDate",
)

_STAGE_SELECT: dict[str, Any] = {"type": "select", "options": list(DEAL_STAGES)}

TRIGGER_CATALOG: Final[list[dict[str, Any]]] = [
    {
        "id": TriggerType.DEAL_CREATED.value,
        "name": "Deal Created",
        "description": "Triggers when a new deal is created",
    },
    {
        "id": TriggerType.DEAL_UPDATED.value,
        "name": "Deal Updated",
        "description": "Triggers when a deal is updated",
    },
    {
        "id": TriggerType.DEAL_STAGE_CHANGED.value,
        "name": "Deal Stage Changed",
        "description": "Triggers when deal stage changes",
        "config": {"fromStage": _STAGE_SELECT, "toStage": _STAGE_SELECT},
    },
    {
        "id": TriggerType.DEAL_AMOUNT_CHANGED.value,
        "name": "Deal Amount Changed",
        "description": "Triggers when deal amount changes",
    },
    {
        "id": TriggerType.DEAL_CLOSED.value,
        "name": "Deal Closed",
        "description": "Triggers when deal is won or lost",
    },
    {
        "id": TriggerType.DEAL_DAYS_IN_STAGE.value,
        "name": "Deal Days In Stage",
        "description": "Triggers after X days in current stage",
        "config": {"days": {"type": "number"}},
    },
]

ACTION_CATALOG: Final[list[dict[str, Any]]] = [
    {
        "id": ActionType.SEND_EMAIL.value,
        "name": "Send Email",
        "description": "Send email notification",
        "config": {
            "to": {"type": "text", "required": True},
            "subject": {"type": "text", "required": True},
            "template": {
                "type": "textarea",
                "required": True,
                "help": "Use {{dealName}}, {{dealAmount}}, {{dealStage}}",
            },
        },
    },
    {
        "id": ActionType.CREATE_TASK.value,
        "name": "Create Task",
        "description": "Create a task automatically",
        "config": {
            "title": {"type": "text", "required": True},
            "description": {"type": "textarea"},
            "priority": {"type": "select", "options": ["low", "medium", "high"]},
            "dueDate": {"type": "date"},
        },
    },
    {
        "id": ActionType.UPDATE_FIELD.value,
        "name": "Update Field",
        "description": "Update a deal field",
        "config": {
            "field": {
                "type": "text",
                "required": True,
                "help": "e.g., stage, probability, amount",
            },
            "value": {"type": "text", "required": True},
        },
    },
    {
        "id": ActionType.CHANGE_STAGE.value,
        "name": "Change Deal Stage",
        "description": "Automatically advance deal stage",
        "config": {"newStage": _STAGE_SELECT},
    },
    {
        "id": ActionType.ADD_TAG.value,
        "name": "Add Tag",
        "description": "Add a tag to the deal",
        "config": {"tag": {"type": "text", "required": True}},
    },
    {
        "id": ActionType.NOTIFY_USER.value,
        "name": "Notify User",
        "description": "Send in-app notification",
        "config": {
            "userId": {"type": "text", "required": True},
            "title": {"type": "text", "required": True},
            "message": {"type": "textarea", "required": True},
        },
    },
    {
        "id": ActionType.SLACK_NOTIFICATION.value,
        "name": "Slack Notification",
        "description": "Post a message to a Slack incoming webhook",
        "config": {
            "webhookUrl": {"type": "text", "required": True},
            "message": {
                "type": "textarea",
                "required": True,
                "help": "Use {{dealName}}, {{dealAmount}}, {{dealStage}}",
            },
        },
    },
    {
        "id": ActionType.WEBHOOK.value,
        "name": "Webhook",
        "description": "Call an external URL with the deal payload",
        "config": {
            "url": {"type": "text", "required": True},
            "method": {"type": "select", "options": ["POST", "PUT", "PATCH"]},
        },
    },
]
