"""Pydantic request/response schemas for the API."""

from app.schemas.deal import DealCreateRequest, DealFields, DealUpdateRequest
from app.schemas.health import HealthResponse
from app.schemas.workflow import (
    ActionRequest,
    CatalogEntryResponse,
    ConditionRequest,
    TriggerRequest,
    WorkflowCreateRequest,
    WorkflowExecuteResponse,
    WorkflowHistoryResponse,
    WorkflowResponse,
    WorkflowUpdateRequest,
)

__all__ = [
    "ActionRequest",
    "CatalogEntryResponse",
    "ConditionRequest",
    "DealCreateRequest",
    "DealFields",
    "DealUpdateRequest",
    "HealthResponse",
    "TriggerRequest",
    "WorkflowCreateRequest",
    "WorkflowExecuteResponse",
    "WorkflowHistoryResponse",
    "WorkflowResponse",
    "WorkflowUpdateRequest",
]
