"""Condition evaluator unit tests (operators, coercion, AND semantics)."""

import pytest

from app.application.services.condition_evaluator import (
    evaluate_condition,
    evaluate_conditions,
    is_empty,
    strict_equals,
    to_number,
    to_text,
)
from app.domain.entities.workflow import WorkflowCondition


def _cond(field: str, operator: str, value=None) -> WorkflowCondition:
    return WorkflowCondition(field=field, operator=operator, value=value)


def test_empty_conditions_pass() -> None:
    """No conditions means the workflow always runs."""
    assert evaluate_conditions({"amount": 1}, []) is True
    assert evaluate_conditions({"amount": 1}, None) is True


def test_all_conditions_must_hold() -> None:
    """Conditions are AND-ed."""
    deal = {"amount": 50000, "stage": "Proposal"}
    passing = _cond("amount", "greater_than", 10000)
    failing = _cond("stage", "equals", "Won")
    assert evaluate_conditions(deal, [passing]) is True
    assert evaluate_conditions(deal, [passing, failing]) is False


def test_equals_is_type_sensitive() -> None:
    """'1' does not equal 1, True does not equal 1, but 1 equals 1.0."""
    assert strict_equals("1", 1) is False
    assert strict_equals(True, 1) is False
    assert strict_equals(1, 1.0) is True
    assert strict_equals("Won", "Won") is True
    assert evaluate_condition("Won", "not_equals", "Lost") is True


@pytest.mark.parametrize(
    ("actual", "expected", "result"),
    [
        (50000, 10000, True),
        ("50000", 10000, True),
        (" 20 ", "10", True),
        (5, 10, False),
        ("abc", 10, False),
        (None, 0, False),
        ("", -1, False),
    ],
)
def test_greater_than_coerces_numbers(actual, expected, result) -> None:
    """Ordering coerces numeric strings; non-numeric values never compare."""
    assert evaluate_condition(actual, "greater_than", expected) is result


def test_less_than_with_nan_is_false() -> None:
    """A non-numeric side makes less_than false, as greater_than."""
    assert evaluate_condition("n/a", "less_than", 10) is False
    assert evaluate_condition(3, "less_than", 10) is True


@pytest.mark.parametrize("record", [{"amount": None}, {}, {"amount": ""}, {"velocity": 3}])
def test_absent_values_never_match_ordering(record) -> None:
    """None, missing and blank fields do not count as 0 on either side."""
    for field in ("amount", "velocity.days"):
        assert evaluate_conditions(record, [_cond(field, "less_than", 100)]) is False
        assert evaluate_conditions(record, [_cond(field, "greater_than", -100)]) is False


def test_to_number_booleans_and_containers() -> None:
    assert to_number(True) == 1.0
    assert to_number(False) == 0.0
    assert to_number([1]) != to_number([1])  # NaN


def test_contains_uses_text_forms() -> None:
    """contains works on strings, numbers, lists and treats None as ''."""
    assert evaluate_condition("Enterprise plan", "contains", "Enterprise") is True
    assert evaluate_condition(12345, "contains", 234) is True
    assert evaluate_condition(["hot", "vip"], "contains", "vip") is True
    assert evaluate_condition(None, "contains", "x") is False
    assert evaluate_condition(None, "not_contains", "x") is True


def test_to_text_integral_float_has_no_fraction() -> None:
    assert to_text(50000.0) == "50000"
    assert to_text(True) == "true"


@pytest.mark.parametrize("value", [None, "", 0, 0.0, False, float("nan")])
def test_is_empty_values(value) -> None:
    assert is_empty(value) is True
    assert evaluate_condition(value, "is_not_empty", None) is False


@pytest.mark.parametrize("value", [[], {}, "x", 1, True])
def test_is_not_empty_values(value) -> None:
    """Empty lists and dicts count as present."""
    assert is_empty(value) is False


def test_unknown_operator_fails_closed() -> None:
    assert evaluate_condition("anything", "matches_regex", ".*") is False


def test_nested_field_path_resolves() -> None:
    """Dot paths walk nested objects; a broken path resolves to None."""
    deal = {"custom": {"region": "EMEA"}}
    assert evaluate_conditions(deal, [_cond("custom.region", "equals", "EMEA")]) is True
    assert evaluate_conditions(deal, [_cond("custom.segment", "is_empty")]) is True
    assert evaluate_conditions(deal, [_cond("custom.region.code", "is_empty")]) is True
