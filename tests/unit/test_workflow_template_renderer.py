"""Template rendering for email, task, Slack and webhook text."""

import pytest

from app.infrastructure.services.workflow_template_renderer import (
    WorkflowTemplateRenderer,
    deal_variables,
)
from tests.fakes import make_deal


@pytest.fixture
def renderer() -> WorkflowTemplateRenderer:
    return WorkflowTemplateRenderer()


def test_deal_variables_from_document() -> None:
    variables = deal_variables(make_deal())
    assert variables == {
        "dealName": "Acme renewal",
        "dealAmount": 50000.0,
        "dealStage": "Proposal",
        "dealProbability": 40.0,
        "dealCloseDate": "2026-12-31",
    }


def test_render_interpolates_deal_variables(renderer) -> None:
    """Integral floats render without .0 and None renders empty."""
    text = renderer.render(
        "{{dealName}} is worth {{dealAmount}} ({{dealCloseDate}})",
        deal_variables(make_deal(closeDate=None)),
    )
    assert text == "Acme renewal is worth 50000 ()"


def test_render_keeps_unknown_placeholders_verbatim(renderer) -> None:
    assert renderer.render("Hi {{dealName}} {{unknownVar}}", {"dealName": "Acme"}) == (
        "Hi Acme {{unknownVar}}"
    )
    assert renderer.render("Hi {{  ownerName }}", {}) == "Hi {{  ownerName }}"


def test_whitespace_inside_known_token_allowed(renderer) -> None:
    assert renderer.render("Deal {{ dealName }}!", {"dealName": "Acme"}) == "Deal Acme!"


@pytest.mark.parametrize(
    "text",
    [
        "Hi {{dealName}} {{contact.name}}",
        "Hi {{dealName}} {# note",
        "Deal {{dealName}} {{ 50% off }}",
        "Deal {{dealName}} {% if x %}",
        "Braces {{dealName}} {{ unclosed",
    ],
)
def test_other_template_syntax_passes_through(renderer, text) -> None:
    expected = text.replace("{{dealName}}", "Acme")
    assert renderer.render(text, {"dealName": "Acme"}) == expected


def test_expressions_are_never_evaluated(renderer) -> None:
    text = "{{ ''.__class__.__mro__[1].__subclasses__() }} {{ dealName|upper }}"
    assert renderer.render(text, {"dealName": "acme"}) == text


def test_reserved_names_stay_verbatim(renderer) -> None:
    rendered = renderer.render("{{none}} {{dealName}}", {"none": "x", "dealName": "Acme"})
    assert rendered == "{{none}} Acme"


def test_trailing_newline_kept(renderer) -> None:
    assert renderer.render("Hi {{dealName}}\n", {"dealName": "Acme"}) == "Hi Acme\n"


def test_render_empty_template(renderer) -> None:
    assert renderer.render(None, {"a": 1}) == ""
    assert renderer.render("", {"a": 1}) == ""


def test_render_value_walks_nested_payload(renderer) -> None:
    payload = {"title": "{{dealName}}", "items": ["{{dealStage}}", 3], "flag": True}
    rendered = renderer.render_value(payload, {"dealName": "Acme", "dealStage": "Won"})
    assert rendered == {"title": "Acme", "items": ["Won", 3], "flag": True}
