"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repos, mail, outbound HTTP, etc.).
"""

from app.application.interfaces import (
    IActionExecutor,
    IDealRepository,
    IHttpDispatcher,
    IMailSender,
    INotificationService,
    ITaskRepository,
    IWorkflowEngine,
    IWorkflowRepository,
)
from app.application.services import evaluate_condition, evaluate_conditions

__all__ = [
    "IActionExecutor",
    "IDealRepository",
    "IHttpDispatcher",
    "IMailSender",
    "INotificationService",
    "ITaskRepository",
    "IWorkflowEngine",
    "IWorkflowRepository",
    "evaluate_condition",
    "evaluate_conditions",
]
