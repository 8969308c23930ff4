"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, not on infrastructure directly.
"""

from app.api.v1.dependencies.auth import ensure_team_access, get_current_user
from app.api.v1.dependencies.workflow import (
    DealTriggerDispatcher,
    get_deal_repo,
    get_deal_repo_for_write,
    get_trigger_dispatcher,
    get_workflow_engine,
    get_workflow_repo,
    get_workflow_repo_for_write,
)

__all__ = [
    "DealTriggerDispatcher",
    "ensure_team_access",
    "get_current_user",
    "get_deal_repo",
    "get_deal_repo_for_write",
    "get_trigger_dispatcher",
    "get_workflow_engine",
    "get_workflow_repo",
    "get_workflow_repo_for_write",
]
