"""
Seed Payloads — Validation of Host-Supplied Data
================================================
pydantic models for JSON-like seed data handed to
CollectionStore.from_payload(). pydantic failures are re-raised as
listwright's own ValidationError so hosts only catch one taxonomy.

Accepted shapes:
    ["Buy milk", "Walk dog"]
    [{"id": "7", "text": "Buy milk", "completed": true, "priority": "high"}]
    {"records": [...], "filter": "active", "search_term": "milk"}
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .records import FilterKind, Priority


class RecordIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    text: str
    completed: bool = False
    priority: Optional[Priority] = None
    editing: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        # JSON hosts often use integer ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("text must not be empty")
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _lower_priority(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class SeedIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    records: list[Union[RecordIn, str]] = []
    filter: FilterKind = FilterKind.ALL
    search_term: str = ""

    @field_validator("filter", mode="before")
    @classmethod
    def _lower_filter(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


def parse_seed(data) -> SeedIn:
    """Validate seed data, accepting a bare list as the records field."""
    if isinstance(data, list):
        data = {"records": data}
    try:
        return SeedIn.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid seed data: {e}") from e

