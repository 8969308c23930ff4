"""Automations API: thin routes over WorkflowRepository and WorkflowEngine."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    ensure_team_access,
    get_current_user,
    get_workflow_engine,
    get_workflow_repo,
    get_workflow_repo_for_write,
)
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IWorkflowRepository
from app.core.constants import ACTION_CATALOG, TRIGGER_CATALOG
from app.core.limiter import limit_manual_execute, limit_writes
from app.domain.entities.workflow import DEFAULT_HISTORY_LIMIT, WorkflowEntity
from app.domain.exceptions import ResourceNotFoundException
from app.infrastructure.persistence.repositories import WorkflowRepository
from app.infrastructure.services import WorkflowEngine
from app.schemas.workflow import (
    ActionOutcomeResponse,
    CatalogEntryResponse,
    MessageResponse,
    WorkflowCreateRequest,
    WorkflowExecuteResponse,
    WorkflowHistoryResponse,
    WorkflowResponse,
    WorkflowUpdateRequest,
    action_to_map,
)

router = APIRouter()


async def _get_team_workflow(
    workflow_repo: IWorkflowRepository, workflow_id: str, user: CurrentUser
) -> WorkflowEntity:
    workflow = await workflow_repo.find_by_id(workflow_id)
    if workflow is None:
        raise ResourceNotFoundException("Workflow", workflow_id)
    ensure_team_access(user, workflow.team_id, "workflow")
    return workflow


@router.get("/available/triggers", response_model=list[CatalogEntryResponse])
async def list_available_triggers(
    _: Annotated[CurrentUser, Depends(get_current_user)],
):
    """Trigger types with config field hints."""
    return TRIGGER_CATALOG


@router.get("/available/actions", response_model=list[CatalogEntryResponse])
async def list_available_actions(
    _: Annotated[CurrentUser, Depends(get_current_user)],
):
    """Action types with config field hints."""
    return ACTION_CATALOG


@router.post("", response_model=WorkflowResponse, status_code=201)
@limit_writes
async def create_workflow(
    request: Request,
    body: WorkflowCreateRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow_repo: Annotated[WorkflowRepository, Depends(get_workflow_repo_for_write)],
):
    """Create a workflow in one of the caller's teams."""
    ensure_team_access(user, body.team_id, "workflow")
    workflow = await workflow_repo.create_workflow(
        team_id=body.team_id,
        created_by=user.id,
        name=body.name,
        trigger=body.trigger.model_dump(mode="json"),
        description=body.description,
        enabled=body.enabled,
        conditions=[c.model_dump(mode="json") for c in body.conditions],
        actions=[action_to_map(a) for a in body.actions],
    )
    return WorkflowResponse.from_entity(workflow)


@router.get("/team/{team_id}", response_model=list[WorkflowResponse])
async def list_team_workflows(
    team_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow_repo: Annotated[WorkflowRepository, Depends(get_workflow_repo)],
):
    """List a team's workflows, newest first."""
    ensure_team_access(user, team_id, "workflow")
    workflows = await workflow_repo.list_by_team(team_id)
    return [WorkflowResponse.from_entity(w) for w in workflows]


@router.get("/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow_repo: Annotated[WorkflowRepository, Depends(get_workflow_repo)],
):
    """Get a workflow by id."""
    workflow = await _get_team_workflow(workflow_repo, workflow_id, user)
    return WorkflowResponse.from_entity(workflow)


@router.put("/{workflow_id}", response_model=WorkflowResponse)
@limit_writes
async def update_workflow(
    request: Request,
    workflow_id: str,
    body: WorkflowUpdateRequest,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow_repo: Annotated[WorkflowRepository, Depends(get_workflow_repo_for_write)],
):
    """Update a workflow definition (partial; stats and history are untouched)."""
    await _get_team_workflow(workflow_repo, workflow_id, user)
    updated = await workflow_repo.update_workflow(workflow_id, body.to_changes())
    if updated is None:
        raise ResourceNotFoundException("Workflow", workflow_id)
    return WorkflowResponse.from_entity(updated)


@router.delete("/{workflow_id}", response_model=MessageResponse)
@limit_writes
async def delete_workflow(
    request: Request,
    workflow_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow_repo: Annotated[WorkflowRepository, Depends(get_workflow_repo_for_write)],
):
    """Delete a workflow together with its history."""
    await _get_team_workflow(workflow_repo, workflow_id, user)
    if not await workflow_repo.delete_workflow(workflow_id):
        raise ResourceNotFoundException("Workflow", workflow_id)
    return MessageResponse(message="Workflow deleted")


@router.patch("/{workflow_id}/toggle", response_model=WorkflowResponse)
@limit_writes
async def toggle_workflow(
    request: Request,
    workflow_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    workflow_repo: Annotated[WorkflowRepository, Depends(get_workflow_repo_for_write)],
):
    """Flip the enabled flag."""
    workflow = await _get_team_workflow(workflow_repo, workflow_id, user)
    updated = await workflow_repo.update_workflow(
        workflow_id, {"enabled": not workflow.enabled}
    )
    if updated is None:
        raise ResourceNotFoundException("Workflow", workflow_id)
    return WorkflowResponse.from_entity(updated)


@router.get("/{workflow_id}/history", response_model=WorkflowHistoryResponse)
async def get_workflow_history(
    workflow_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    engine: Annotated[WorkflowEngine, Depends(get_workflow_engine)],
    limit: int | None = Query(None, ge=1, le=DEFAULT_HISTORY_LIMIT),
):
    """Recent runs, most recent first (default page 50), plus stats."""
    await _get_team_workflow(engine.workflow_repo, workflow_id, user)
    history = await engine.get_history(workflow_id, limit)
    return WorkflowHistoryResponse.from_history(history)


@router.post("/{workflow_id}/execute/{deal_id}", response_model=WorkflowExecuteResponse)
@limit_manual_execute
async def execute_workflow(
    request: Request,
    workflow_id: str,
    deal_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    engine: Annotated[WorkflowEngine, Depends(get_workflow_engine)],
):
    """Run a workflow on a deal now. 400 when the deal does not meet the conditions."""
    await _get_team_workflow(engine.workflow_repo, workflow_id, user)
    result = await engine.execute_manually(workflow_id, deal_id)
    return WorkflowExecuteResponse(
        results=[ActionOutcomeResponse.from_outcome(o) for o in result.outcomes]
    )
