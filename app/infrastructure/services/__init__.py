"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.workflow_action_executor import WorkflowActionExecutor
from app.infrastructure.services.workflow_engine import WorkflowEngine
from app.infrastructure.services.workflow_factory import build_workflow_engine
from app.infrastructure.services.workflow_notification_service import (
    LogOnlyNotificationService,
)
from app.infrastructure.services.workflow_template_renderer import (
    WorkflowTemplateRenderer,
)

__all__ = [
    "LogOnlyNotificationService",
    "WorkflowActionExecutor",
    "WorkflowEngine",
    "WorkflowTemplateRenderer",
    "build_workflow_engine",
]
