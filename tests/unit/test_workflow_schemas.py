"""Request schema validation for workflows and deals."""

import pytest
from pydantic import ValidationError

from app.schemas.deal import DealCreateRequest, DealUpdateRequest
from app.schemas.workflow import (
    WorkflowCreateRequest,
    WorkflowUpdateRequest,
    action_to_map,
)


def _create_body(**overrides) -> dict:
    body = {
        "team_id": "team-acme",
        "name": "  Big deal alert ",
        "trigger": {"type": "deal_updated"},
        "conditions": [{"field": "amount", "operator": "greater_than", "value": 10000}],
        "actions": [{"type": "add_tag", "config": {"tag": "big-deal"}}],
    }
    body.update(overrides)
    return body


def test_create_request_strips_name_and_defaults() -> None:
    request = WorkflowCreateRequest.model_validate(_create_body())
    assert request.name == "Big deal alert"
    assert request.enabled is True
    assert request.description is None


def test_blank_name_rejected() -> None:
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(_create_body(name="   "))


def test_unknown_trigger_and_operator_rejected() -> None:
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(_create_body(trigger={"type": "deal_deleted"}))
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(
            _create_body(conditions=[{"field": "amount", "operator": "between", "value": 1}])
        )


def test_days_in_stage_requires_days() -> None:
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(
            _create_body(trigger={"type": "deal_days_in_stage", "config": {}})
        )
    ok = WorkflowCreateRequest.model_validate(
        _create_body(trigger={"type": "deal_days_in_stage", "config": {"days": 14}})
    )
    assert ok.trigger.config == {"days": 14}


def test_action_config_validated_per_type() -> None:
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(
            _create_body(actions=[{"type": "send_email", "config": {"to": "a@b.test"}}])
        )
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(
            _create_body(actions=[{"type": "update_field", "config": {"field": "teamId", "value": "x"}}])
        )
    with pytest.raises(ValidationError):
        WorkflowCreateRequest.model_validate(
            _create_body(actions=[{"type": "launch_rocket", "config": {}}])
        )


def test_action_to_map_keeps_wire_names() -> None:
    request = WorkflowCreateRequest.model_validate(
        _create_body(
            actions=[
                {"type": "change_stage", "config": {"newStage": "Won"}},
                {"type": "update_field", "config": {"field": "closeDate", "value": None}},
                {"type": "webhook", "config": {"url": "https://erp.test/h", "method": "patch"}},
            ]
        )
    )
    maps = [action_to_map(a) for a in request.actions]
    assert maps[0] == {"type": "change_stage", "config": {"newStage": "Won"}}
    assert maps[1] == {"type": "update_field", "config": {"field": "closeDate", "value": None}}
    assert maps[2] == {"type": "webhook", "config": {"url": "https://erp.test/h", "method": "PATCH"}}


def test_update_request_only_sends_set_fields() -> None:
    request = WorkflowUpdateRequest.model_validate({"enabled": False, "description": None})
    assert request.to_changes() == {"enabled": False, "description": None}


def test_deal_fields_accept_extra_and_reject_reserved() -> None:
    create = DealCreateRequest.model_validate(
        {"team_id": "team-acme", "fields": {"name": "Acme", "closeDate": "2026-12-31", "custom": {"a": 1}}}
    )
    assert create.fields.to_document() == {
        "name": "Acme",
        "closeDate": "2026-12-31",
        "custom": {"a": 1},
    }
    with pytest.raises(ValidationError):
        DealUpdateRequest.model_validate({"teamId": "team-other"})
