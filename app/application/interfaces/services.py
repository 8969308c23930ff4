"""Service interfaces (ports) for the application layer.

External collaborators the workflow engine calls through narrow contracts:
mail, in-app notifications and outbound HTTP. Implementations live in
app.infrastructure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.workflow import (
        ActionOutcome,
        DeliveryReport,
        WorkflowHistory,
        WorkflowRunResult,
    )
    from app.domain.entities.workflow import WorkflowAction, WorkflowEntity


class IMailSender(Protocol):
    """Protocol for sending email (send_email action). May raise on transport error."""

    async def send(self, to: str, subject: str, html: str) -> None:
        """Send one HTML email."""


class INotificationService(Protocol):
    """Protocol for in-app user notifications (fire-and-forget)."""

    async def notify_user(self, user_id: str, payload: dict[str, Any]) -> None:
        """Deliver a notification payload (title, message, context) to a user."""


class IHttpDispatcher(Protocol):
    """Protocol for outbound webhook/Slack calls. Never raises; reports delivery."""

    async def send(
        self,
        url: str,
        json: dict[str, Any],
        *,
        method: str = "POST",
        headers: dict[str, str] | None = None,
    ) -> DeliveryReport:
        """Send a JSON request and return a best-effort delivery report."""


class IActionExecutor(Protocol):
    """Protocol for executing a single workflow action. Never raises."""

    async def execute(
        self,
        action: WorkflowAction,
        record: dict[str, Any],
        team_id: str,
        workflow: WorkflowEntity,
    ) -> ActionOutcome:
        """Run one action and return its outcome."""


class IWorkflowEngine(Protocol):
    """Protocol for the workflow runner."""

    async def trigger(
        self,
        trigger_type: str,
        record_id: str,
        team_id: str,
        context: dict[str, Any] | None = None,
    ) -> list[WorkflowRunResult]:
        """Run every matching enabled workflow of the team for the record."""

    async def execute_manually(
        self, workflow_id: str, record_id: str
    ) -> WorkflowRunResult:
        """Run one workflow on one record; raises on missing records or unmet conditions."""

    async def get_history(self, workflow_id: str, limit: int | None = None) -> WorkflowHistory:
        """Return recent history (most recent first) and stats."""
