"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.deal_repo import DealRepository
from app.infrastructure.persistence.repositories.task_repo import TaskRepository
from app.infrastructure.persistence.repositories.workflow_repo import WorkflowRepository

__all__ = [
    "BaseRepository",
    "DealRepository",
    "TaskRepository",
    "WorkflowRepository",
]
