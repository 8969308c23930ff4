"""Deal repository: deals are exchanged as JSON-like documents.

Known keys map to columns; any other key is kept in the attributes JSON column
and merged back into the document on load, so workflow conditions and
update_field actions can address arbitrary nested fields.
"""

from __future__ import annotations

import copy
import math
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.persistence.models.deal import Deal
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import parse_iso_datetime, utc_now

# Document key -> column attribute.
_COLUMN_KEYS = {
    "userId": "user_id",
    "name": "name",
    "amount": "amount",
    "stage": "stage",
    "probability": "probability",
    "closeDate": "close_date",
    "tags": "tags",
}
_NUMERIC_KEYS = frozenset({"amount", "probability"})
_TEXT_KEYS = frozenset({"userId", "name", "stage", "closeDate"})
# Managed by the store; never copied into attributes.
_RESERVED_KEYS = frozenset({"id", "teamId", "stageChangedAt", "createdAt", "updatedAt"})


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def to_document(deal: Deal) -> dict[str, Any]:
    """Map Deal ORM to the document shape used by workflows and the API."""
    document: dict[str, Any] = copy.deepcopy(deal.attributes or {})
    document.update(
        {
            "id": deal.id,
            "teamId": deal.team_id,
            "userId": deal.user_id,
            "name": deal.name,
            "amount": deal.amount,
            "stage": deal.stage,
            "probability": deal.probability,
            "closeDate": deal.close_date,
            "tags": list(deal.tags or []),
            "stageChangedAt": _iso(deal.stage_changed_at),
            "createdAt": _iso(deal.created_at),
            "updatedAt": _iso(deal.updated_at),
        }
    )
    return document


def _number(key: str, value: Any) -> float | None:
    """Cast like the document store: numbers, booleans and numeric strings; blank is null."""
    if isinstance(value, (bool, int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            number = math.nan
    else:
        number = math.nan
    if not math.isfinite(number):
        raise ValidationException(f"Deal field {key} must be a number", field=key)
    return number


def _column_value(key: str, value: Any) -> Any:
    if value is None:
        return [] if key == "tags" else None
    if key in _NUMERIC_KEYS:
        return _number(key, value)
    if key == "tags":
        if not isinstance(value, list):
            raise ValidationException("Deal field tags must be a list", field=key)
        return [str(tag) for tag in value]
    if key in _TEXT_KEYS:
        return str(value)
    return value


def _stage_changed_at(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError as e:
        raise ValidationException(
            "Deal field stageChangedAt must be an ISO datetime", field="stageChangedAt"
        ) from e


def column_values(document: dict[str, Any]) -> dict[str, Any]:
    """Validated column values for the known keys of a deal document.

    Raises:
        ValidationException: A known field holds a value its column cannot store.
    """
    values = {
        column: _column_value(key, document[key])
        for key, column in _COLUMN_KEYS.items()
        if key in document
    }
    if "stageChangedAt" in document:
        values["stage_changed_at"] = _stage_changed_at(document["stageChangedAt"])
    return values


def _apply_document(deal: Deal, document: dict[str, Any]) -> None:
    # Validate the whole document before touching the row.
    for column, value in column_values(document).items():
        setattr(deal, column, value)
    deal.attributes = copy.deepcopy(
        {
            key: value
            for key, value in document.items()
            if key not in _COLUMN_KEYS and key not in _RESERVED_KEYS
        }
    )


class DealRepository(BaseRepository[Deal]):
    """Deal repository. Implements IDealRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Deal)

    async def find(self, record_id: str) -> dict[str, Any] | None:
        deal = await self.get_by_id(record_id)
        return to_document(deal) if deal else None

    async def save(self, record: dict[str, Any]) -> None:
        """Persist the whole document over the stored deal (last write wins)."""
        record_id = record.get("id")
        deal = await self.get_by_id(str(record_id)) if record_id else None
        if deal is None:
            raise ResourceNotFoundException("Deal", str(record_id))
        async with self.db.begin_nested():
            _apply_document(deal, record)
            await self.db.flush()

    async def create(  # type: ignore[override]
        self, team_id: str, user_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Create a deal owned by user_id; stage entry time starts now when a stage is set."""
        deal = Deal(team_id=team_id, user_id=user_id, tags=[], attributes={})
        _apply_document(deal, {**fields, "userId": fields.get("userId") or user_id})
        if deal.stage:
            deal.stage_changed_at = utc_now()
        return to_document(await super().create(deal))

    async def update_fields(
        self, record_id: str, fields: dict[str, Any]
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Merge fields into the stored document; return (before, after) documents."""
        deal = await self.get_by_id(record_id)
        if deal is None:
            raise ResourceNotFoundException("Deal", record_id)
        before = to_document(deal)
        after = {**copy.deepcopy(before), **fields}
        if after.get("stage") != before.get("stage"):
            after["stageChangedAt"] = utc_now().isoformat()
        await self.save(after)
        await self.db.refresh(deal)
        return before, to_document(deal)

    async def list_entered_stage_between(
        self, team_id: str, start: datetime, end: datetime
    ) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(Deal)
            .where(
                Deal.team_id == team_id,
                Deal.stage_changed_at.is_not(None),
                Deal.stage_changed_at >= start,
                Deal.stage_changed_at < end,
            )
            .order_by(Deal.stage_changed_at.asc())
        )
        return [to_document(d) for d in result.scalars().all()]
