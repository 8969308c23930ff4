"""Build a WorkflowEngine bound to one session (API requests, background triggers, scripts)."""

from __future__ import annotations

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import IMailSender, INotificationService
from app.core.config import Settings
from app.infrastructure.external.email import create_mail_sender
from app.infrastructure.external.http import HttpxDispatcher
from app.infrastructure.persistence.repositories import (
    DealRepository,
    TaskRepository,
    WorkflowRepository,
)
from app.infrastructure.services.workflow_action_executor import WorkflowActionExecutor
from app.infrastructure.services.workflow_engine import WorkflowEngine
from app.infrastructure.services.workflow_notification_service import (
    LogOnlyNotificationService,
)
from app.infrastructure.services.workflow_template_renderer import WorkflowTemplateRenderer


def build_workflow_engine(
    db: AsyncSession,
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
    mail_sender: IMailSender | None = None,
    notification_service: INotificationService | None = None,
) -> WorkflowEngine:
    """Wire repositories, collaborators and the action executor into a WorkflowEngine."""
    deal_repo = DealRepository(db)
    executor = WorkflowActionExecutor(
        deal_repo,
        TaskRepository(db),
        mail_sender=mail_sender or create_mail_sender(settings),
        notification_service=notification_service or LogOnlyNotificationService(),
        http_dispatcher=HttpxDispatcher(
            http_client, timeout=settings.outbound_http_timeout_seconds
        ),
        template_renderer=WorkflowTemplateRenderer(),
    )
    return WorkflowEngine(
        WorkflowRepository(db, history_limit=settings.workflow_history_limit),
        deal_repo,
        executor,
        history_limit=settings.workflow_history_limit,
        default_history_page=settings.workflow_history_default_page,
    )
