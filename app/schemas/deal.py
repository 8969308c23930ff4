"""Deal API schemas. Unknown keys are accepted and kept on the deal document."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_RESERVED_KEYS = frozenset(
    {"id", "teamId", "team_id", "userId", "stageChangedAt", "createdAt", "updatedAt"}
)


class DealFields(BaseModel):
    """Known deal fields plus arbitrary extra fields (nested objects allowed)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = Field(default=None, max_length=300)
    amount: float | None = Field(default=None, ge=0)
    stage: str | None = Field(default=None, max_length=64)
    probability: float | None = Field(default=None, ge=0, le=100)
    close_date: str | None = Field(default=None, alias="closeDate")
    tags: list[str] | None = None

    @model_validator(mode="after")
    def reject_reserved_keys(self) -> "DealFields":
        reserved = _RESERVED_KEYS.intersection(self.model_extra or {})
        if reserved:
            raise ValueError(f"Fields are managed by the server: {', '.join(sorted(reserved))}")
        return self

    def to_document(self) -> dict[str, Any]:
        """Explicitly sent fields, keyed by their document names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class DealCreateRequest(BaseModel):
    """Request body for creating a deal."""

    team_id: str = Field(..., min_length=1)
    fields: DealFields = Field(default_factory=DealFields)


class DealUpdateRequest(DealFields):
    """Request body for PATCH /deals/{id} (partial; unknown keys merged into the document)."""
