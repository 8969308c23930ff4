"""Deals API: minimal deal surface that raises workflow triggers after each change."""

from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.api.v1.dependencies import (
    DealTriggerDispatcher,
    ensure_team_access,
    get_current_user,
    get_deal_repo,
    get_deal_repo_for_write,
    get_trigger_dispatcher,
)
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IDealRepository
from app.application.use_cases.deals import detect_deal_triggers
from app.core.limiter import limit_writes
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.deal import DealCreateRequest, DealUpdateRequest

router = APIRouter()


async def _get_team_deal(
    deal_repo: IDealRepository, deal_id: str, user: CurrentUser
) -> dict[str, Any]:
    deal = await deal_repo.find(deal_id)
    if deal is None:
        raise ResourceNotFoundException("Deal", deal_id)
    ensure_team_access(user, str(deal.get("teamId")), "deal")
    return deal


@router.post("", response_model=dict[str, Any], status_code=201)
@limit_writes
async def create_deal(
    request: Request,
    body: DealCreateRequest,
    background_tasks: BackgroundTasks,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    deal_repo: Annotated[IDealRepository, Depends(get_deal_repo_for_write)],
    dispatcher: Annotated[DealTriggerDispatcher, Depends(get_trigger_dispatcher)],
):
    """Create a deal owned by the caller; fires deal_created."""
    ensure_team_access(user, body.team_id, "deal")
    deal = await deal_repo.create(body.team_id, user.id, body.fields.to_document())
    # Triggers run after the response in their own session.
    await deal_repo.commit()
    dispatcher.schedule(
        background_tasks, deal["id"], body.team_id, detect_deal_triggers(None, deal)
    )
    return deal


@router.get("/{deal_id}", response_model=dict[str, Any])
async def get_deal(
    deal_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    deal_repo: Annotated[IDealRepository, Depends(get_deal_repo)],
):
    """Get a deal document by id."""
    return await _get_team_deal(deal_repo, deal_id, user)


@router.patch("/{deal_id}", response_model=dict[str, Any])
@limit_writes
async def update_deal(
    request: Request,
    deal_id: str,
    body: DealUpdateRequest,
    background_tasks: BackgroundTasks,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    deal_repo: Annotated[IDealRepository, Depends(get_deal_repo_for_write)],
    dispatcher: Annotated[DealTriggerDispatcher, Depends(get_trigger_dispatcher)],
):
    """Merge fields into a deal; fires deal_updated plus stage/amount/closed triggers."""
    existing = await _get_team_deal(deal_repo, deal_id, user)
    before, after = await deal_repo.update_fields(deal_id, body.to_document())
    await deal_repo.commit()
    dispatcher.schedule(
        background_tasks,
        deal_id,
        str(existing["teamId"]),
        detect_deal_triggers(before, after),
    )
    return after
