"""
Collection Store — Ordered Records With Immutable Updates
=========================================================
Owns an ordered collection of Records and the view state around it
(completion filter, search term, selection set).

Guarantees:
    1. Record ids are unique and never reused, even after deletion
    2. At most one record has editing=True
    3. Every selected id references a record that is still present
    4. Every change replaces the records tuple instead of mutating it,
       and bumps `version`, so identity or version comparison detects it

The store is single-threaded and synchronous. It holds no lock: a host that
shares it between threads must confine it to one thread or wrap it in a
mutex. There is no global instance; whoever constructs a store owns it.

Usage:
    store = CollectionStore()
    milk = store.add("Buy milk")
    store.add("Walk dog")
    store.toggle(milk.id)
    store.set_filter("active")
    store.visible_records()      # → (Record(text="Walk dog", ...),)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any, Callable, Iterable, Iterator, Optional

from . import events
from .config import StoreConfig
from .errors import NotFoundError, StoreError, ValidationError
from .events import ChangeEvent, Subscriber
from .ids import IdGenerator
from .payloads import parse_seed
from .records import (
    FilterKind, Priority, Record,
    clean_text, coerce_filter, coerce_priority,
)

logger = logging.getLogger(__name__)

# How many used ids a generator may return in a row before we give up
_MAX_ID_ATTEMPTS = 1000


class CollectionStore:
    """In-memory collection of Records with filter, search, edit and selection."""

    def __init__(
        self,
        seed: Iterable[Any] = None,
        config: StoreConfig = None,
        id_generator: IdGenerator = None,
    ):
        """
        Args:
            seed: Initial contents. Items may be texts (given fresh ids),
                Records or dicts in Record.to_dict() shape; both are validated
                and keep their ids.
            config: Store configuration; defaults to StoreConfig().
            id_generator: Zero-argument callable returning new ids.
                Overrides config.id_strategy when given.
        """
        self.config = config or StoreConfig()
        self._next_id: IdGenerator = id_generator or self.config.id_generator()
        self._issued: set[str] = set()
        self._records: tuple[Record, ...] = ()
        self._filter = FilterKind.ALL
        self._search_term = ""
        self._selected: frozenset[str] = frozenset()
        self._version = 0
        self._subscribers: list[Subscriber] = []

        if seed is not None:
            self._records = self._build_seed(seed)

    @classmethod
    def from_payload(
        cls,
        data: Any,
        config: StoreConfig = None,
        id_generator: IdGenerator = None,
    ) -> CollectionStore:
        """Build a store from JSON-like data validated by payloads.SeedIn."""
        seed = parse_seed(data)
        items = [
            item if isinstance(item, str) else item.model_dump()
            for item in seed.records
        ]
        store = cls(seed=items, config=config, id_generator=id_generator)
        store._filter = seed.filter
        store._search_term = seed.search_term
        return store

    # ─── Read Access ──────────────────────────────────────

    @property
    def records(self) -> tuple[Record, ...]:
        """The whole collection in order. A new tuple after every change."""
        return self._records

    @property
    def version(self) -> int:
        return self._version

    @property
    def filter(self) -> FilterKind:
        return self._filter

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def editing_id(self) -> Optional[str]:
        """Id of the record in edit mode, or None."""
        for record in self._records:
            if record.editing:
                return record.id
        return None

    def get(self, record_id: str) -> Record:
        return self._records[self._index_of(record_id, "get")]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    def visible_records(self) -> tuple[Record, ...]:
        """Records passing the completion filter, then the search term.

        Pure: depends only on (records, filter, search_term).
        """
        return tuple(
            r for r in self._records
            if self._filter.matches(r) and r.matches_search(self._search_term)
        )

    def selected_ids(self) -> frozenset[str]:
        return self._selected

    @property
    def summary(self) -> dict:
        """Counters for a status footer."""
        completed = sum(1 for r in self._records if r.completed)
        return {
            "total": len(self._records),
            "active": len(self._records) - completed,
            "completed": completed,
            "selected": len(self._selected),
            "filter": self._filter.value,
            "search_term": self._search_term,
            "version": self._version,
        }

    # ─── Subscriptions ────────────────────────────────────

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call `callback(event)` after every committed change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: Subscriber):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    # ─── Records ──────────────────────────────────────────

    def add(self, text: str) -> Record:
        """Append a new active record. Raises ValidationError on blank text."""
        cleaned = clean_text(text)
        record = Record(id=self._new_id(), text=cleaned)
        self._commit(events.ADD, [record.id], records=self._records + (record,))
        return record

    def toggle(self, record_id: str):
        index = self._index_of(record_id, "toggle")
        record = self._records[index]
        self._commit(
            events.TOGGLE, [record_id],
            records=self._replace_at(index, record.toggled()),
        )

    def remove(self, record_id: str):
        index = self._index_of(record_id, "remove")
        self._commit(
            events.REMOVE, [record_id],
            records=self._records[:index] + self._records[index + 1:],
        )

    def bulk_remove(self, record_ids: Iterable[str]) -> int:
        """Remove every record whose id is given. Unknown ids are ignored.

        Returns the number of records removed.
        """
        if isinstance(record_ids, str):
            record_ids = [record_ids]
        targets = set(record_ids)
        kept = tuple(r for r in self._records if r.id not in targets)
        removed = [r.id for r in self._records if r.id in targets]

        unknown = targets.difference(removed)
        if unknown:
            logger.debug("bulk_remove ignored unknown ids: %s", sorted(unknown))
        if not removed:
            return 0

        self._commit(events.BULK_REMOVE, removed, records=kept)
        return len(removed)

    def set_priority(self, record_id: str, priority: Optional[Priority | str]):
        index = self._index_of(record_id, "set_priority")
        value = coerce_priority(priority)
        record = self._records[index]
        if record.priority == value:
            return
        self._commit(
            events.SET_PRIORITY, [record_id],
            records=self._replace_at(index, record.with_priority(value)),
        )

    def move(self, record_id: str, new_index: int):
        """Move a record to position `new_index` (0-based) in the collection."""
        index = self._index_of(record_id, "move")
        if isinstance(new_index, bool) or not isinstance(new_index, int):
            raise ValidationError(f"index must be an integer, got {new_index!r}")
        if not 0 <= new_index < len(self._records):
            raise ValidationError(
                f"index {new_index} out of range 0..{len(self._records) - 1}"
            )
        if new_index == index:
            return
        reordered = list(self._records)
        reordered.insert(new_index, reordered.pop(index))
        self._commit(events.MOVE, [record_id], records=tuple(reordered))

    def toggle_all(self):
        """Complete everything if anything is active, otherwise reopen everything."""
        if not self._records:
            return
        target = any(not r.completed for r in self._records)
        changed = [r.id for r in self._records if r.completed != target]
        self._commit(
            events.TOGGLE_ALL, changed,
            records=tuple(
                r if r.completed == target else r.with_completed(target)
                for r in self._records
            ),
        )

    def clear_completed(self) -> int:
        """Remove all completed records. Returns how many were removed."""
        removed = [r.id for r in self._records if r.completed]
        if not removed:
            return 0
        self._commit(
            events.CLEAR_COMPLETED, removed,
            records=tuple(r for r in self._records if not r.completed),
        )
        return len(removed)

    # ─── Editing ──────────────────────────────────────────

    def begin_edit(self, record_id: str):
        """Put a record in edit mode, cancelling any other edit in progress."""
        index = self._index_of(record_id, "begin_edit")
        if self._records[index].editing:
            return
        touched = [record_id]
        updated = []
        for record in self._records:
            if record.id == record_id:
                updated.append(record.with_editing(True))
            elif record.editing:
                touched.append(record.id)
                updated.append(record.with_editing(False))
            else:
                updated.append(record)
        self._commit(events.BEGIN_EDIT, touched, records=tuple(updated))

    def commit_edit(self, record_id: str, new_text: str):
        """Replace the text and leave edit mode. Raises ValidationError on blank text."""
        index = self._index_of(record_id, "commit_edit")
        cleaned = clean_text(new_text)
        record = self._records[index]
        if record.text == cleaned and not record.editing:
            return
        self._commit(
            events.COMMIT_EDIT, [record_id],
            records=self._replace_at(index, record.with_text(cleaned)),
        )

    def cancel_edit(self, record_id: str):
        index = self._index_of(record_id, "cancel_edit")
        record = self._records[index]
        if not record.editing:
            return
        self._commit(
            events.CANCEL_EDIT, [record_id],
            records=self._replace_at(index, record.with_editing(False)),
        )

    # ─── View State ───────────────────────────────────────

    def set_filter(self, kind: FilterKind | str):
        value = coerce_filter(kind)
        if value == self._filter:
            return
        self._filter = value
        self._commit(events.SET_FILTER, [])

    def set_search_term(self, term: Optional[str]):
        if term is None:
            term = ""
        if not isinstance(term, str):
            raise ValidationError(
                f"search term must be a string, got {type(term).__name__}"
            )
        if term == self._search_term:
            return
        self._search_term = term
        self._commit(events.SET_SEARCH, [])

    # ─── Selection ────────────────────────────────────────

    def toggle_select(self, record_id: str):
        self._index_of(record_id, "toggle_select")
        self._commit(
            events.SELECT, [record_id],
            selected=self._selected.symmetric_difference({record_id}),
        )

    def select_visible(self):
        """Add every currently visible record to the selection."""
        added = [r.id for r in self.visible_records() if r.id not in self._selected]
        if not added:
            return
        self._commit(events.SELECT, added, selected=self._selected.union(added))

    def clear_selection(self):
        if not self._selected:
            return
        cleared = sorted(self._selected)
        self._commit(events.CLEAR_SELECTION, cleared, selected=frozenset())

    def remove_selected(self) -> int:
        """Remove every selected record. The selection is empty afterwards."""
        if not self._selected:
            return 0
        return self.bulk_remove(self._selected)

    # ─── Internals ────────────────────────────────────────

    def _build_seed(self, seed: Iterable[Any]) -> tuple[Record, ...]:
        if isinstance(seed, str):
            seed = [seed]
        items = list(seed)

        # Reserve explicit ids first so generated ones cannot collide with them
        for item in items:
            explicit = None
            if isinstance(item, Record):
                explicit = str(item.id)
            elif isinstance(item, Mapping) and item.get("id") is not None:
                explicit = str(item["id"])
            if explicit is None:
                continue
            if explicit in self._issued:
                raise ValidationError(f"Duplicate id {explicit!r} in seed")
            self._issued.add(explicit)

        records = []
        for item in items:
            if isinstance(item, str):
                records.append(Record(id=self._new_id(), text=clean_text(item)))
            elif isinstance(item, Record):
                records.append(Record.from_dict(asdict(item)))
            elif isinstance(item, Mapping):
                data = dict(item)
                if data.get("id") is None:
                    data["id"] = self._new_id()
                records.append(Record.from_dict(data))
            else:
                raise ValidationError(
                    f"Seed items must be str, Record or dict, got {type(item).__name__}"
                )

        editing = [r.id for r in records if r.editing]
        if len(editing) > 1:
            raise ValidationError(
                f"At most one record may be in edit mode, seed has {editing}"
            )
        return tuple(records)

    def _new_id(self) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = str(self._next_id())
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
        raise StoreError(
            f"Id generator returned {_MAX_ID_ATTEMPTS} already-used ids in a row"
        )

    def _index_of(self, record_id: str, operation: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        raise NotFoundError(record_id, operation)

    def _replace_at(self, index: int, record: Record) -> tuple[Record, ...]:
        return self._records[:index] + (record,) + self._records[index + 1:]

    def _commit(
        self,
        action: str,
        ids: Iterable[str],
        records: tuple[Record, ...] = None,
        selected: frozenset[str] = None,
    ) -> ChangeEvent:
        """Install new state, prune the selection, bump the version, notify."""
        if records is not None:
            self._records = records
        if selected is not None:
            self._selected = frozenset(selected)
        if self._selected:
            present = {r.id for r in self._records}
            if not self._selected <= present:
                self._selected = self._selected & present

        self._version += 1
        event = ChangeEvent(action=action, version=self._version, ids=tuple(ids))
        logger.debug("%s v%d ids=%s", action, self._version, list(event.ids))

        for callback in list(self._subscribers):
            callback(event)
        return event
