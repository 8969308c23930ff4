"""Span helpers used by the engine and executor (tracing provider not configured)."""

import pytest

from app.shared.telemetry.tracing import TracedOperation, _arg_attributes, traced


class _Runner:
    @traced("test.run")
    async def run(self, trigger_type: str, record_id: str, payload: dict) -> str:
        if trigger_type == "boom":
            raise RuntimeError("boom")
        return f"{trigger_type}:{record_id}"


async def test_traced_returns_result_and_propagates_errors() -> None:
    runner = _Runner()
    assert await runner.run("deal_updated", "deal-1", payload={}) == "deal_updated:deal-1"
    with pytest.raises(RuntimeError, match="boom"):
        await runner.run("boom", "deal-1", {})


def test_only_identifier_arguments_become_span_attributes() -> None:
    attributes = _arg_attributes(
        ("self", "trigger_type", "record_id", "payload"),
        (object(), "deal_updated", "deal-1"),
        {"payload": {"secret": "x"}, "team_id": None},
    )
    assert attributes == {"arg.trigger_type": "deal_updated", "arg.record_id": "deal-1"}


async def test_traced_operation_sets_attributes_and_reraises() -> None:
    async with TracedOperation("workflow.action", {"action.type": "add_tag"}) as op:
        op.set_attribute("action.status", "success")
    with pytest.raises(ValueError):
        async with TracedOperation("workflow.action"):
            raise ValueError("bad")
