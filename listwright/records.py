"""
Records — Immutable Collection Entries
======================================
A Record is a value: every update builds a new Record with
dataclasses.replace(), so consumers comparing by identity see the change.

Components:
    Priority    — optional tag on a record (low / medium / high)
    FilterKind  — completion filter applied to the visible view
    Record      — a single entry (id, text, completed, priority, editing)
"""

from __future__ import annotations

from dataclasses import dataclass, replace, asdict
from enum import Enum
from typing import Any, Optional

from .errors import ValidationError


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FilterKind(str, Enum):
    """Which records survive the completion filter."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    def matches(self, record: Record) -> bool:
        if self is FilterKind.ACTIVE:
            return not record.completed
        if self is FilterKind.COMPLETED:
            return record.completed
        return True


# ─────────────────────────────────────────────────────────────
#  Coercion Helpers
# ─────────────────────────────────────────────────────────────

def clean_text(text: Any, field_name: str = "text") -> str:
    """Strip a label and reject it if nothing is left."""
    if not isinstance(text, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(text).__name__}"
        )
    cleaned = text.strip()
    if not cleaned:
        raise ValidationError(f"{field_name} must not be empty")
    return cleaned


def coerce_priority(value: Any) -> Optional[Priority]:
    """Accept a Priority, its string value, or None."""
    if value is None or isinstance(value, Priority):
        return value
    if isinstance(value, str):
        try:
            return Priority(value.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(p.value for p in Priority)
    raise ValidationError(f"Unknown priority {value!r}. Allowed: {allowed} or None")


def coerce_filter(value: Any) -> FilterKind:
    """Accept a FilterKind or its string value."""
    if isinstance(value, FilterKind):
        return value
    if isinstance(value, str):
        try:
            return FilterKind(value.strip().lower())
        except ValueError:
            pass
    allowed = ", ".join(k.value for k in FilterKind)
    raise ValidationError(f"Unknown filter {value!r}. Allowed: {allowed}")


# ─────────────────────────────────────────────────────────────
#  Record
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Record:
    """A single collection entry.

    `editing` is a transient UI flag. The store guarantees that at most one
    record in a collection carries it.
    """

    id: str
    text: str
    completed: bool = False
    priority: Optional[Priority] = None
    editing: bool = False

    def toggled(self) -> Record:
        return replace(self, completed=not self.completed)

    def with_text(self, text: str) -> Record:
        return replace(self, text=text, editing=False)

    def with_priority(self, priority: Optional[Priority]) -> Record:
        return replace(self, priority=priority)

    def with_editing(self, editing: bool) -> Record:
        return replace(self, editing=editing)

    def with_completed(self, completed: bool) -> Record:
        return replace(self, completed=completed)

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match. An empty term matches everything."""
        if not term:
            return True
        return term.casefold() in self.text.casefold()

    def to_dict(self) -> dict:
        """Serialize to a plain dict for rendering."""
        data = asdict(self)
        data["priority"] = self.priority.value if self.priority else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Record:
        """Build a Record from a dict, ignoring unknown keys."""
        fields = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "id" not in fields:
            raise ValidationError("record is missing an id")
        fields["id"] = str(fields["id"])
        fields["text"] = clean_text(fields.get("text"))
        fields["priority"] = coerce_priority(fields.get("priority"))
        fields["completed"] = bool(fields.get("completed", False))
        fields["editing"] = bool(fields.get("editing", False))
        return cls(**fields)
