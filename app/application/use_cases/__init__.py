"""Application use cases: one entry point per workflow."""

from app.application.use_cases.deals import (
    detect_deal_triggers,
    dispatch_deal_triggers,
    is_closed_stage,
    run_stage_age_sweep,
)

__all__ = [
    "detect_deal_triggers",
    "dispatch_deal_triggers",
    "is_closed_stage",
    "run_stage_age_sweep",
]
