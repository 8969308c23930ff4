"""Automations API tests with repositories and engine overridden (no DB)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_workflow_engine,
    get_workflow_repo,
    get_workflow_repo_for_write,
)
from app.application.dtos.workflow import ActionOutcome, WorkflowHistory, WorkflowRunResult
from app.domain.exceptions import ConditionsNotMetException
from app.main import app
from app.shared.utils.datetime import utc_now
from tests.fakes import OTHER_TEAM_ID, TEAM_ID, make_workflow

BASE = "/api/v1/automations"


@pytest.fixture
def workflow_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.find_by_id = AsyncMock(return_value=make_workflow())
    app.dependency_overrides[get_workflow_repo] = lambda: repo
    app.dependency_overrides[get_workflow_repo_for_write] = lambda: repo
    return repo


@pytest.fixture
def engine(workflow_repo) -> MagicMock:
    engine = MagicMock()
    engine.workflow_repo = workflow_repo
    engine.execute_manually = AsyncMock()
    engine.get_history = AsyncMock()
    app.dependency_overrides[get_workflow_engine] = lambda: engine
    return engine


async def test_requires_bearer_token(client: AsyncClient, workflow_repo) -> None:
    response = await client.get(f"{BASE}/team/{TEAM_ID}")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_invalid_token_returns_401(client: AsyncClient, workflow_repo) -> None:
    response = await client.get(
        f"{BASE}/team/{TEAM_ID}", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_catalogs(client: AsyncClient, auth_headers) -> None:
    triggers = await client.get(f"{BASE}/available/triggers", headers=auth_headers)
    actions = await client.get(f"{BASE}/available/actions", headers=auth_headers)
    assert triggers.status_code == 200
    assert actions.status_code == 200
    assert "deal_stage_changed" in [t["id"] for t in triggers.json()]
    assert "slack_notification" in [a["id"] for a in actions.json()]


async def test_create_workflow(client: AsyncClient, auth_headers, workflow_repo) -> None:
    workflow_repo.create_workflow = AsyncMock(return_value=make_workflow(name="Big deal alert"))
    response = await client.post(
        BASE,
        headers=auth_headers,
        json={
            "team_id": TEAM_ID,
            "name": "Big deal alert",
            "trigger": {"type": "deal_updated"},
            "conditions": [{"field": "amount", "operator": "greater_than", "value": 10000}],
            "actions": [{"type": "add_tag", "config": {"tag": "big-deal"}}],
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Big deal alert"
    assert data["stats"]["total_executions"] == 0
    kwargs = workflow_repo.create_workflow.await_args.kwargs
    assert kwargs["team_id"] == TEAM_ID
    assert kwargs["created_by"] == "user-alice"
    assert kwargs["trigger"] == {"type": "deal_updated", "config": {}}
    assert kwargs["actions"] == [{"type": "add_tag", "config": {"tag": "big-deal"}}]


async def test_create_workflow_in_foreign_team_is_forbidden(
    client: AsyncClient, auth_headers, workflow_repo
) -> None:
    workflow_repo.create_workflow = AsyncMock()
    response = await client.post(
        BASE,
        headers=auth_headers,
        json={"team_id": OTHER_TEAM_ID, "name": "x", "trigger": {"type": "deal_created"}},
    )
    assert response.status_code == 403
    workflow_repo.create_workflow.assert_not_awaited()


async def test_create_workflow_invalid_action_returns_422(
    client: AsyncClient, auth_headers, workflow_repo
) -> None:
    response = await client.post(
        BASE,
        headers=auth_headers,
        json={
            "team_id": TEAM_ID,
            "name": "x",
            "trigger": {"type": "deal_created"},
            "actions": [{"type": "change_stage", "config": {}}],
        },
    )
    assert response.status_code == 422


async def test_get_workflow_not_found(client: AsyncClient, auth_headers, workflow_repo) -> None:
    workflow_repo.find_by_id = AsyncMock(return_value=None)
    response = await client.get(f"{BASE}/wf-missing", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_get_workflow_of_other_team_is_forbidden(
    client: AsyncClient, auth_headers, workflow_repo
) -> None:
    workflow_repo.find_by_id = AsyncMock(return_value=make_workflow(team_id=OTHER_TEAM_ID))
    response = await client.get(f"{BASE}/wf-1", headers=auth_headers)
    assert response.status_code == 403


async def test_list_team_workflows(client: AsyncClient, auth_headers, workflow_repo) -> None:
    workflow_repo.list_by_team = AsyncMock(
        return_value=[make_workflow("wf-2"), make_workflow("wf-1")]
    )
    response = await client.get(f"{BASE}/team/{TEAM_ID}", headers=auth_headers)
    assert response.status_code == 200
    assert [w["id"] for w in response.json()] == ["wf-2", "wf-1"]


async def test_toggle_flips_enabled(client: AsyncClient, auth_headers, workflow_repo) -> None:
    workflow_repo.update_workflow = AsyncMock(return_value=make_workflow(enabled=False))
    response = await client.patch(f"{BASE}/wf-1/toggle", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["enabled"] is False
    workflow_repo.update_workflow.assert_awaited_once_with("wf-1", {"enabled": False})


async def test_update_workflow_partial(client: AsyncClient, auth_headers, workflow_repo) -> None:
    workflow_repo.update_workflow = AsyncMock(return_value=make_workflow(name="Renamed"))
    response = await client.put(f"{BASE}/wf-1", headers=auth_headers, json={"name": "Renamed"})
    assert response.status_code == 200
    workflow_repo.update_workflow.assert_awaited_once_with("wf-1", {"name": "Renamed"})


async def test_delete_workflow(client: AsyncClient, auth_headers, workflow_repo) -> None:
    workflow_repo.delete_workflow = AsyncMock(return_value=True)
    response = await client.delete(f"{BASE}/wf-1", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Workflow deleted"}


async def test_history(client: AsyncClient, auth_headers, engine) -> None:
    workflow = make_workflow()
    engine.get_history = AsyncMock(
        return_value=WorkflowHistory(history=[], stats=workflow.stats)
    )
    response = await client.get(f"{BASE}/wf-1/history?limit=10", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["history"] == []
    engine.get_history.assert_awaited_once_with("wf-1", 10)


async def test_history_limit_over_cap_returns_422(client: AsyncClient, auth_headers, engine) -> None:
    response = await client.get(f"{BASE}/wf-1/history?limit=101", headers=auth_headers)
    assert response.status_code == 422


async def test_manual_execute_returns_results(client: AsyncClient, auth_headers, engine) -> None:
    engine.execute_manually = AsyncMock(
        return_value=WorkflowRunResult(
            workflow_id="wf-1",
            record_id="deal-1",
            executed_at=utc_now(),
            outcomes=[
                ActionOutcome.success("add_tag", {"message": "Tag added", "tag": "vip"}),
                ActionOutcome.failure("send_email", "send_email requires config.to"),
            ],
        )
    )
    response = await client.post(f"{BASE}/wf-1/execute/deal-1", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Workflow executed"
    assert data["results"][0] == {
        "type": "add_tag",
        "status": "success",
        "result": {"message": "Tag added", "tag": "vip"},
        "error": None,
    }
    assert data["results"][1]["status"] == "failed"


async def test_manual_execute_conditions_not_met_returns_400(
    client: AsyncClient, auth_headers, engine
) -> None:
    engine.execute_manually = AsyncMock(side_effect=ConditionsNotMetException("wf-1", "deal-1"))
    response = await client.post(f"{BASE}/wf-1/execute/deal-1", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "CONDITIONS_NOT_MET"


async def test_token_for_other_team_cannot_execute(
    client: AsyncClient, make_auth_headers, engine
) -> None:
    headers = make_auth_headers(teams=(OTHER_TEAM_ID,))
    response = await client.post(f"{BASE}/wf-1/execute/deal-1", headers=headers)
    assert response.status_code == 403
    engine.execute_manually.assert_not_awaited()
