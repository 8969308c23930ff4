"""Workflow action executor: run one action against a deal (implements IActionExecutor).

Every failure (missing config, store error, mail transport error) is
captured into a failed ActionOutcome so the runner can continue with
the next action. Mutating actions persist the deal immediately and change the
shared record only after the store accepts the new document.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable
from typing import Any

from app.application.dtos.workflow import ActionOutcome
from app.application.interfaces.repositories import IDealRepository, ITaskRepository
from app.application.interfaces.services import (
    IHttpDispatcher,
    IMailSender,
    INotificationService,
)
from app.domain.entities.workflow import WorkflowAction, WorkflowEntity
from app.infrastructure.services.workflow_template_renderer import (
    WorkflowTemplateRenderer,
    deal_variables,
)
from app.shared.enums import ActionType, TaskPriority
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import TracedOperation
from app.shared.utils.datetime import parse_iso_datetime, utc_now
from app.shared.utils.field_path import set_path

logger = get_logger(__name__)

# Store-managed fields that update_field may not overwrite.
_PROTECTED_FIELDS = frozenset({"id", "teamId", "createdAt", "updatedAt"})

_Handler = Callable[
    [dict[str, Any], dict[str, Any], str, WorkflowEntity],
    Awaitable[dict[str, Any]],
]


class ActionConfigError(ValueError):
    """Action config is missing a required key or holds an invalid value."""


def _require(config: dict[str, Any], action_type: str, *keys: str) -> None:
    for key in keys:
        value = config.get(key)
        if value is None or value == "":
            raise ActionConfigError(f"{action_type} requires config.{key}")


def _optional_mapping(config: dict[str, Any], action_type: str, key: str) -> dict[str, Any]:
    value = config.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ActionConfigError(f"{action_type} config.{key} must be an object")
    return value


class WorkflowActionExecutor:
    """Executes send_email, create_task, update_field, notify_user, change_stage,
    add_tag, slack_notification and webhook actions."""

    def __init__(
        self,
        deal_repo: IDealRepository,
        task_repo: ITaskRepository,
        *,
        mail_sender: IMailSender,
        notification_service: INotificationService,
        http_dispatcher: IHttpDispatcher,
        template_renderer: WorkflowTemplateRenderer | None = None,
    ) -> None:
        self._deal_repo = deal_repo
        self._task_repo = task_repo
        self._mail_sender = mail_sender
        self._notification_service = notification_service
        self._http = http_dispatcher
        self._renderer = template_renderer or WorkflowTemplateRenderer()
        self._handlers: dict[str, _Handler] = {
            ActionType.SEND_EMAIL.value: self._send_email,
            ActionType.CREATE_TASK.value: self._create_task,
            ActionType.UPDATE_FIELD.value: self._update_field,
            ActionType.NOTIFY_USER.value: self._notify_user,
            ActionType.CHANGE_STAGE.value: self._change_stage,
            ActionType.ADD_TAG.value: self._add_tag,
            ActionType.SLACK_NOTIFICATION.value: self._slack_notification,
            ActionType.WEBHOOK.value: self._webhook,
        }

    async def execute(
        self,
        action: WorkflowAction,
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> ActionOutcome:
        """Run one action. Never raises; failures come back as a failed outcome."""
        handler = self._handlers.get(action.type)
        if handler is None:
            return ActionOutcome.failure(action.type, f"Unknown action type: {action.type}")
        async with TracedOperation(
            "workflow.action",
            {"workflow.id": workflow.id, "action.type": action.type},
        ) as op:
            try:
                result = await handler(action.config or {}, record, team_id, workflow)
            except Exception as e:
                logger.warning(
                    "Action %s failed in workflow %s (deal_id=%s): %s",
                    action.type,
                    workflow.id,
                    record.get("id"),
                    e,
                )
                op.set_attribute("action.status", "failed")
                return ActionOutcome.failure(action.type, str(e) or type(e).__name__)
            op.set_attribute("action.status", "success")
            return ActionOutcome.success(action.type, result)

    async def _save(self, record: dict[str, Any], updated: dict[str, Any]) -> None:
        """Persist the changed copy; the shared record only changes once the store accepts it."""
        await self._deal_repo.save(updated)
        record.clear()
        record.update(updated)

    async def _send_email(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "send_email", "to", "subject", "template")
        variables = {
            **deal_variables(record),
            **_optional_mapping(config, "send_email", "variables"),
        }
        to = str(config["to"])
        subject = self._renderer.render(str(config["subject"]), variables)
        body = self._renderer.render(str(config["template"]), variables)
        await self._mail_sender.send(to, subject, body)
        return {"message": "Email sent", "recipient": to}

    async def _create_task(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "create_task", "title")
        priority = config.get("priority") or TaskPriority.MEDIUM.value
        if priority not in TaskPriority.values():
            raise ActionConfigError(f"create_task config.priority is invalid: {priority}")
        due_date = None
        if config.get("dueDate"):
            due_date = parse_iso_datetime(str(config["dueDate"]))
        variables = deal_variables(record)
        description = config.get("description")
        task = await self._task_repo.create(
            team_id,
            record.get("id"),
            self._renderer.render(str(config["title"]), variables),
            created_by=record.get("userId") or workflow.created_by,
            description=(
                self._renderer.render(str(description), variables) if description else None
            ),
            priority=priority,
            due_date=due_date,
            assigned_to=config.get("assignedTo"),
        )
        return {"message": "Task created", "taskId": task.id}

    async def _update_field(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "update_field", "field")
        if "value" not in config:
            raise ActionConfigError("update_field requires config.value")
        field_path = str(config["field"])
        if field_path.split(".")[0] in _PROTECTED_FIELDS:
            raise ActionConfigError(f"Field cannot be updated: {field_path}")
        value = config["value"]
        updated = copy.deepcopy(record)
        set_path(updated, field_path, value)
        await self._save(record, updated)
        return {"message": "Field updated", "field": field_path, "value": value}

    async def _notify_user(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "notify_user", "userId", "title")
        variables = deal_variables(record)
        user_id = str(config["userId"])
        title = self._renderer.render(str(config["title"]), variables)
        await self._notification_service.notify_user(
            user_id,
            {
                "title": title,
                "message": self._renderer.render(str(config.get("message") or ""), variables),
                "dealId": record.get("id"),
                "teamId": team_id,
                "workflowId": workflow.id,
            },
        )
        return {"message": "Notification sent", "userId": user_id, "title": title}

    async def _change_stage(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "change_stage", "newStage")
        new_stage = config["newStage"]
        updated = copy.deepcopy(record)
        if record.get("stage") != new_stage:
            updated["stageChangedAt"] = utc_now().isoformat()
        updated["stage"] = new_stage
        await self._save(record, updated)
        return {"message": "Stage changed", "newStage": new_stage}

    async def _add_tag(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "add_tag", "tag")
        tag = config["tag"]
        tags = record.get("tags")
        if not isinstance(tags, list):
            tags = []
        if tag not in tags:
            updated = copy.deepcopy(record)
            updated["tags"] = [*tags, tag]
            await self._save(record, updated)
        return {"message": "Tag added", "tag": tag}

    async def _slack_notification(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "slack_notification", "webhookUrl", "message")
        webhook_url = str(config["webhookUrl"])
        text = self._renderer.render(str(config["message"]), deal_variables(record))
        report = await self._http.send(webhook_url, {"text": text})
        return {
            "message": "Slack notification queued",
            "webhookUrl": webhook_url,
            "delivery": report.to_dict(),
        }

    async def _webhook(
        self,
        config: dict[str, Any],
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> dict[str, Any]:
        _require(config, "webhook", "url")
        url = str(config["url"])
        method = str(config.get("method") or "POST").upper()
        payload = _optional_mapping(config, "webhook", "payload")
        headers = _optional_mapping(config, "webhook", "headers")
        body = {
            "workflowId": workflow.id,
            "workflowName": workflow.name,
            "teamId": team_id,
            "deal": record,
            "payload": self._renderer.render_value(payload, deal_variables(record)),
        }
        report = await self._http.send(
            url,
            body,
            method=method,
            headers={str(k): str(v) for k, v in headers.items()} or None,
        )
        return {
            "message": "Webhook triggered",
            "url": url,
            "method": method,
            "delivery": report.to_dict(),
        }
