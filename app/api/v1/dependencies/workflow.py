"""Workflow, deal and engine dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

import httpx
from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.workflow import TriggerEvent
from app.application.interfaces.services import IMailSender
from app.application.use_cases.deals import dispatch_deal_triggers
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_db, get_db_transactional, session_scope
from app.infrastructure.persistence.repositories import DealRepository, WorkflowRepository
from app.infrastructure.services import WorkflowEngine, build_workflow_engine
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _http_client(request: Request) -> httpx.AsyncClient | None:
    # Lifespan may not have run (e.g. ASGITransport in tests).
    return getattr(request.app.state, "http_client", None)


def _mail_sender(request: Request) -> IMailSender | None:
    return getattr(request.app.state, "mail_sender", None)


async def get_workflow_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowRepository:
    """Workflow repository for read operations (list, get by id, history)."""
    return WorkflowRepository(db, history_limit=get_settings().workflow_history_limit)


async def get_workflow_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowRepository:
    """Workflow repository for create/update/delete (transactional)."""
    return WorkflowRepository(db, history_limit=get_settings().workflow_history_limit)


async def get_deal_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DealRepository:
    """Deal repository for read operations."""
    return DealRepository(db)


async def get_deal_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> DealRepository:
    """Deal repository for create/update (transactional)."""
    return DealRepository(db)


async def get_workflow_engine(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowEngine:
    """Workflow engine sharing the request transaction (manual execution)."""
    return build_workflow_engine(
        db,
        get_settings(),
        http_client=_http_client(request),
        mail_sender=_mail_sender(request),
    )


class DealTriggerDispatcher:
    """Runs deal triggers after the response, each batch in its own transaction."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        mail_sender: IMailSender | None = None,
    ) -> None:
        self._http_client = http_client
        self._mail_sender = mail_sender

    def schedule(
        self,
        background_tasks: BackgroundTasks,
        record_id: str,
        team_id: str,
        events: list[TriggerEvent],
    ) -> None:
        if events:
            background_tasks.add_task(self.run, record_id, team_id, events)

    async def run(self, record_id: str, team_id: str, events: list[TriggerEvent]) -> None:
        """Fire the triggers; failures are logged, never raised (nobody awaits this)."""
        try:
            async with session_scope() as session:
                engine = build_workflow_engine(
                    session,
                    get_settings(),
                    http_client=self._http_client,
                    mail_sender=self._mail_sender,
                )
                await dispatch_deal_triggers(engine, record_id, team_id, events)
        except Exception:
            logger.exception(
                "Deal triggers failed for deal %s (team_id=%s, triggers=%s)",
                record_id,
                team_id,
                [e.trigger_type for e in events],
            )


def get_trigger_dispatcher(request: Request) -> DealTriggerDispatcher:
    """Background trigger dispatcher using the app-wide HTTP client and mail sender."""
    return DealTriggerDispatcher(_http_client(request), _mail_sender(request))
