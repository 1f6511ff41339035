"""
Store Errors
============
Typed failures raised by the collection store.

    StoreError       — base class, catch-all for hosts
    ValidationError  — bad input (empty text, unknown filter kind, ...)
    NotFoundError    — an operation referenced an id that is not in the store

Both concrete errors are local and recoverable. The store never retries and
never swallows them, except in the bulk operations documented on
CollectionStore.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every error raised by listwright."""
    pass


class ValidationError(StoreError, ValueError):
    """Raised when input is rejected before any state change."""
    pass


class NotFoundError(StoreError, KeyError):
    """Raised when no record has the requested id."""

    def __init__(self, record_id: str, operation: str = ""):
        self.record_id = record_id
        self.operation = operation
        super().__init__(record_id)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the id
        if self.operation:
            return f"{self.operation}: no record with id {self.record_id!r}"
        return f"No record with id {self.record_id!r}"
