"""Application services: workflow condition evaluation."""

from app.application.services.condition_evaluator import (
    evaluate_condition,
    evaluate_conditions,
)

__all__ = [
    "evaluate_condition",
    "evaluate_conditions",
]
