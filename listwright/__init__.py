"""
listwright: an in-memory collection store with immutable updates.

Records are added, toggled, edited, filtered, searched and bulk-selected
through a CollectionStore that the host constructs and owns.
"""
from .errors import StoreError, ValidationError, NotFoundError
from .records import Record, Priority, FilterKind
from .ids import CounterIds, UuidIds, make_id_generator
from .config import StoreConfig, configure_logging
from .events import ChangeEvent, ChangeLog
from .store import CollectionStore

__version__ = "0.1.0"
__all__ = [
    "StoreError", "ValidationError", "NotFoundError",
    "Record", "Priority", "FilterKind",
    "CounterIds", "UuidIds", "make_id_generator",
    "StoreConfig", "configure_logging",
    "ChangeEvent", "ChangeLog",
    "CollectionStore",
]
