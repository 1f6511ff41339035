"""
Change Events — Observation Without Modification
================================================
The store announces every committed state change to its subscribers.

Components:
    ChangeEvent — what changed (action name, new version, affected ids)
    ChangeLog   — append-only log of events, usable directly as a subscriber

A subscriber only observes. It receives immutable events and never gets a
handle that could mutate the store.
"""

from __future__ import annotations

import time
from collections import Counter, deque
from dataclasses import dataclass, field, asdict
from typing import Callable, Optional

ADD = "add"
TOGGLE = "toggle"
REMOVE = "remove"
BULK_REMOVE = "bulk_remove"
BEGIN_EDIT = "begin_edit"
COMMIT_EDIT = "commit_edit"
CANCEL_EDIT = "cancel_edit"
SET_PRIORITY = "set_priority"
MOVE = "move"
TOGGLE_ALL = "toggle_all"
CLEAR_COMPLETED = "clear_completed"
SET_FILTER = "set_filter"
SET_SEARCH = "set_search_term"
SELECT = "select"
CLEAR_SELECTION = "clear_selection"


@dataclass(frozen=True)
class ChangeEvent:
    """A single committed change."""

    action: str                   # One of the action names above
    version: int                  # Store version after the change
    ids: tuple[str, ...] = ()     # Records touched by the change
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["ids"] = list(self.ids)
        return data


Subscriber = Callable[[ChangeEvent], None]


class ChangeLog:
    """Append-only log of change events.

    Pass the log itself to CollectionStore.subscribe(). With `max_entries`
    set, the oldest events are dropped once the log is full.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self._entries: deque[ChangeEvent] = deque(maxlen=max_entries)

    def __call__(self, event: ChangeEvent) -> None:
        self.record(event)

    def record(self, event: ChangeEvent) -> int:
        """Record an event. Returns its index in the log."""
        self._entries.append(event)
        return len(self._entries) - 1

    @property
    def entries(self) -> list[ChangeEvent]:
        """All retained events (read-only copy)."""
        return list(self._entries)

    def events_for_record(self, record_id: str) -> list[ChangeEvent]:
        return [e for e in self._entries if record_id in e.ids]

    def actions(self) -> dict[str, int]:
        """How many times each action appears in the log."""
        return dict(Counter(e.action for e in self._entries))

    @property
    def total_events(self) -> int:
        return len(self._entries)

    @property
    def last_version(self) -> int:
        """Version of the newest event, 0 for an empty log."""
        if not self._entries:
            return 0
        return self._entries[-1].version

    def clear(self):
        self._entries.clear()
