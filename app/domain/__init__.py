"""Domain layer: entities and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    ExecutionHistoryEntry,
    WorkflowAction,
    WorkflowCondition,
    WorkflowEntity,
    WorkflowStats,
    WorkflowTrigger,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConditionsNotMetException,
    DealClarityException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Entities
    "ExecutionHistoryEntry",
    "WorkflowAction",
    "WorkflowCondition",
    "WorkflowEntity",
    "WorkflowStats",
    "WorkflowTrigger",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ConditionsNotMetException",
    "DealClarityException",
    "ResourceNotFoundException",
    "ValidationException",
]
