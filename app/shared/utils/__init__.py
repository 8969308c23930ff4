"""Shared utilities: datetime, generators, dot-path field access."""

from app.shared.utils.datetime import (
    ensure_utc,
    parse_iso_datetime,
    utc_now,
    whole_days_between,
)
from app.shared.utils.field_path import MISSING, get_path, resolve, set_path
from app.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "whole_days_between",
    "MISSING",
    "get_path",
    "resolve",
    "set_path",
]
