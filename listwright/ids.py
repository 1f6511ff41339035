"""
Id Generators
=============
Any zero-argument callable returning a string can generate record ids.
Two are provided:

    CounterIds  — monotonic "1", "2", ... (optionally prefixed)
    UuidIds     — random uuid4 hex strings
"""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

from .errors import ValidationError

IdGenerator = Callable[[], str]

ID_STRATEGIES = ("counter", "uuid")


class CounterIds:
    """Monotonic integer ids. Never repeats within one instance."""

    def __init__(self, prefix: str = "", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


class UuidIds:
    """Random ids; collisions are possible in theory and rejected by the store."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}{uuid.uuid4().hex}"


def make_id_generator(strategy: str = "counter", prefix: str = "") -> IdGenerator:
    """Build a generator by strategy name."""
    if strategy == "counter":
        return CounterIds(prefix=prefix)
    if strategy == "uuid":
        return UuidIds(prefix=prefix)
    raise ValidationError(
        f"Unknown id strategy {strategy!r}. Available: {list(ID_STRATEGIES)}"
    )
