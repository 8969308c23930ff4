"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.deal import Deal
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TeamMixin,
    TeamScopedModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.task import Task
from app.infrastructure.persistence.models.workflow import Workflow

__all__ = [
    "Deal",
    "Task",
    "Workflow",
    "CuidMixin",
    "TeamMixin",
    "TeamScopedModel",
    "TimestampMixin",
]
