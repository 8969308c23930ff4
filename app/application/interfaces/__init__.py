"""Application interfaces (ports): repositories and external services."""

from app.application.interfaces.repositories import (
    IDealRepository,
    ITaskRepository,
    IWorkflowRepository,
)
from app.application.interfaces.services import (
    IActionExecutor,
    IHttpDispatcher,
    IMailSender,
    INotificationService,
    IWorkflowEngine,
)

__all__ = [
    "IActionExecutor",
    "IDealRepository",
    "IHttpDispatcher",
    "IMailSender",
    "INotificationService",
    "ITaskRepository",
    "IWorkflowEngine",
    "IWorkflowRepository",
]
