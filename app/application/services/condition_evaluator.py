"""Workflow condition evaluation (pure, no side effects).

A workflow passes when every condition holds (AND); an empty list always
passes. Fields are dot paths into the deal document; a path that does not
resolve is treated as None. Unknown operators fail closed.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from typing import Any

from app.domain.entities.workflow import WorkflowCondition
from app.shared.enums import ConditionOperator
from app.shared.telemetry.logging import get_logger
from app.shared.utils.field_path import resolve

logger = get_logger(__name__)

_NAN = float("nan")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float:
    """Coerce a value to float for ordering comparisons; NaN when not numeric.

    Booleans count as 1/0 and numeric strings are parsed after trimming.
    None, blank strings and containers are not numeric.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return _NAN
        try:
            return float(text)
        except ValueError:
            return _NAN
    return _NAN


def to_text(value: Any) -> str:
    """String form used by contains / not_contains."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def strict_equals(actual: Any, expected: Any) -> bool:
    """Type-sensitive equality: '1' != 1 and True != 1; int and float compare numerically."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return (
            isinstance(actual, bool)
            and isinstance(expected, bool)
            and actual == expected
        )
    if _is_number(actual) and _is_number(expected):
        return actual == expected
    if type(actual) is not type(expected):
        return False
    return actual == expected


def is_empty(value: Any) -> bool:
    """True for None, False, 0, NaN and ''. Empty lists and dicts are not empty."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if _is_number(value):
        return value == 0 or math.isnan(value)
    if isinstance(value, str):
        return value == ""
    return False


def evaluate_condition(actual: Any, operator: str, expected: Any) -> bool:
    """Apply one operator to a resolved field value and the condition's value."""
    try:
        op = ConditionOperator(operator)
    except ValueError:
        logger.warning("Unknown condition operator %r; failing closed", operator)
        return False

    if op is ConditionOperator.EQUALS:
        return strict_equals(actual, expected)
    if op is ConditionOperator.NOT_EQUALS:
        return not strict_equals(actual, expected)
    if op is ConditionOperator.GREATER_THAN:
        # NaN on either side makes both comparisons False.
        return to_number(actual) > to_number(expected)
    if op is ConditionOperator.LESS_THAN:
        return to_number(actual) < to_number(expected)
    if op is ConditionOperator.CONTAINS:
        return to_text(expected) in to_text(actual)
    if op is ConditionOperator.NOT_CONTAINS:
        return to_text(expected) not in to_text(actual)
    if op is ConditionOperator.IS_EMPTY:
        return is_empty(actual)
    return not is_empty(actual)


def evaluate_conditions(
    record: dict[str, Any],
    conditions: Iterable[WorkflowCondition] | None,
) -> bool:
    """Return True when every condition holds for the record (empty or None passes)."""
    if not conditions:
        return True
    return all(
        evaluate_condition(resolve(record, c.field), c.operator, c.value)
        for c in conditions
    )
