"""
Store Configuration
===================
Settings a host passes to CollectionStore. Only populate the fields that
matter to you; everything has a default.

Environment variables (read by StoreConfig.from_env):
    LISTWRIGHT_ID_STRATEGY     counter | uuid
    LISTWRIGHT_ID_PREFIX       string prepended to every generated id
    LISTWRIGHT_LOG_LEVEL       DEBUG | INFO | WARNING | ERROR
    LISTWRIGHT_CHANGELOG_SIZE  max events kept by the shell's ChangeLog
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ValidationError
from .ids import ID_STRATEGIES, IdGenerator, make_id_generator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class StoreConfig:
    """Configuration for a CollectionStore and its host."""

    id_strategy: str = "counter"            # "counter" or "uuid"
    id_prefix: str = ""                     # e.g. "task-" → "task-1"
    log_level: str = "WARNING"              # Only used by configure_logging()
    changelog_size: Optional[int] = None    # None = unbounded

    def __post_init__(self):
        if self.id_strategy not in ID_STRATEGIES:
            raise ValidationError(
                f"Unknown id strategy {self.id_strategy!r}. "
                f"Available: {list(ID_STRATEGIES)}"
            )
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValidationError(f"Unknown log level {self.log_level!r}")
        if self.changelog_size is not None and self.changelog_size < 1:
            raise ValidationError("changelog_size must be a positive integer")

    def id_generator(self) -> IdGenerator:
        return make_id_generator(self.id_strategy, self.id_prefix)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> StoreConfig:
        """Build a config from LISTWRIGHT_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        size = env.get("LISTWRIGHT_CHANGELOG_SIZE", "").strip()
        if size:
            try:
                changelog_size = int(size)
            except ValueError:
                raise ValidationError(
                    f"LISTWRIGHT_CHANGELOG_SIZE must be an integer, got {size!r}"
                ) from None
        else:
            changelog_size = None

        return cls(
            id_strategy=env.get("LISTWRIGHT_ID_STRATEGY", "counter").strip().lower(),
            id_prefix=env.get("LISTWRIGHT_ID_PREFIX", ""),
            log_level=env.get("LISTWRIGHT_LOG_LEVEL", "WARNING").strip(),
            changelog_size=changelog_size,
        )


def configure_logging(config: StoreConfig) -> None:
    """Set up root logging for a host process. The library never calls this."""
    logging.basicConfig(level=getattr(logging, config.log_level), format=LOG_FORMAT)
