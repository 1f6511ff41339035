"""
listwright Shell
================
Interactive line shell over a CollectionStore. It is a reference host:
it renders after every committed change (via a store subscription), shows
validation errors inline, and treats unknown ids as no-ops because they
usually come from stale input.

Usage:
    python -m listwright.shell
    python -m listwright.shell --seed "Buy milk" --seed "Walk dog"
    python -m listwright.shell --seed-json todos.json --id-strategy uuid
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Optional

from .config import StoreConfig, configure_logging
from .errors import NotFoundError, ValidationError
from .events import ChangeEvent, ChangeLog
from .records import Record
from .store import CollectionStore

logger = logging.getLogger(__name__)

PROMPT = "  ☑⟩ "

HELP_TEXT = """
  Records
    add <text>             Add a record
    toggle <id>            Flip completed
    rm <id>                Remove a record
    pri <id> <level|none>  Set priority (low, medium, high)
    move <id> <index>      Move a record to a 0-based position
    toggle-all             Complete all, or reopen all if none is active
    clear-completed        Remove completed records

  Editing
    edit <id>              Enter edit mode
    commit <id> <text>     Save new text and leave edit mode
    cancel <id>            Leave edit mode without saving

  View
    filter <all|active|completed>
    search [term]          Case-insensitive; no term clears the search
    ls                     Show visible records
    stats                  Show counters

  Selection
    select <id>            Toggle selection of a record
    select-visible         Select every visible record
    unselect               Clear the selection
    rm-selected            Remove every selected record

  Commands: help, log, exit
"""


class Shell:
    """Line-oriented host for a CollectionStore.

    `execute(line)` returns the text to show, so the shell can be driven
    without a terminal.
    """

    def __init__(self, store: CollectionStore, changelog: ChangeLog = None):
        self.store = store
        self.changelog = changelog or ChangeLog(max_entries=store.config.changelog_size)
        self._dirty = False
        self.finished = False
        store.subscribe(self.changelog)
        store.subscribe(self._on_change)

        self._commands: dict[str, Callable[[str], Optional[str]]] = {
            "add": self._cmd_add,
            "toggle": self._cmd_toggle,
            "rm": self._cmd_remove,
            "pri": self._cmd_priority,
            "move": self._cmd_move,
            "toggle-all": lambda _: self.store.toggle_all(),
            "clear-completed": self._cmd_clear_completed,
            "edit": self._cmd_edit,
            "commit": self._cmd_commit,
            "cancel": self._cmd_cancel,
            "filter": self._cmd_filter,
            "search": lambda arg: self.store.set_search_term(arg),
            "ls": lambda _: self.render(),
            "stats": self._cmd_stats,
            "select": self._cmd_select,
            "select-visible": lambda _: self.store.select_visible(),
            "unselect": lambda _: self.store.clear_selection(),
            "rm-selected": self._cmd_remove_selected,
            "log": self._cmd_log,
            "help": lambda _: HELP_TEXT,
            "exit": self._cmd_exit,
            "quit": self._cmd_exit,
        }

    def _on_change(self, event: ChangeEvent):
        self._dirty = True

    # ─── Rendering ────────────────────────────────────────

    def render(self) -> str:
        visible = self.store.visible_records()
        if not visible:
            return "  (nothing to show)"
        selected = self.store.selected_ids()
        return "\n".join(self._format_record(r, r.id in selected) for r in visible)

    @staticmethod
    def _format_record(record: Record, selected: bool) -> str:
        mark = "x" if record.completed else " "
        sel = "*" if selected else " "
        line = f"  {sel}[{mark}] {record.id:<4} {record.text}"
        if record.priority:
            line += f"  !{record.priority.value}"
        if record.editing:
            line += "  ✎"
        return line

    # ─── Dispatch ─────────────────────────────────────────

    def execute(self, line: str) -> str:
        """Run one command line and return its output."""
        line = line.strip()
        if not line:
            return ""
        name, _, arg = line.partition(" ")
        command = self._commands.get(name.lower())
        if command is None:
            return f"  ⚠ Unknown command '{name}'. Type 'help' for commands."

        self._dirty = False
        try:
            output = command(arg.strip())
        except ValidationError as e:
            return f"  ⚠ {e}"
        except NotFoundError as e:
            # Stale id, e.g. a record removed a moment ago: nothing to do
            logger.debug("ignored: %s", e)
            return ""

        parts = [output] if output else []
        if self._dirty and name.lower() != "ls":
            parts.append(self.render())
        return "\n".join(parts)

    def run(self):
        """Read commands from stdin until 'exit' or EOF."""
        print("  listwright — type 'help' for commands")
        while True:
            try:
                line = input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                break
            output = self.execute(line)
            if output:
                print(output)
            if self.finished:
                break

    # ─── Commands ─────────────────────────────────────────

    @staticmethod
    def _split(arg: str, usage: str) -> tuple[str, str]:
        first, _, rest = arg.partition(" ")
        if not first or not rest.strip():
            raise ValidationError(f"Usage: {usage}")
        return first, rest.strip()

    @staticmethod
    def _require(arg: str, usage: str) -> str:
        if not arg:
            raise ValidationError(f"Usage: {usage}")
        return arg

    def _cmd_add(self, arg: str) -> str:
        record = self.store.add(arg)
        return f"  + {record.id}"

    def _cmd_toggle(self, arg: str):
        self.store.toggle(self._require(arg, "toggle <id>"))

    def _cmd_remove(self, arg: str):
        self.store.remove(self._require(arg, "rm <id>"))

    def _cmd_priority(self, arg: str):
        record_id, level = self._split(arg, "pri <id> <low|medium|high|none>")
        self.store.set_priority(record_id, None if level.lower() == "none" else level)

    def _cmd_move(self, arg: str):
        record_id, index = self._split(arg, "move <id> <index>")
        try:
            position = int(index)
        except ValueError:
            raise ValidationError(f"index must be an integer, got {index!r}") from None
        self.store.move(record_id, position)

    def _cmd_clear_completed(self, arg: str) -> str:
        return f"  - {self.store.clear_completed()} removed"

    def _cmd_edit(self, arg: str):
        self.store.begin_edit(self._require(arg, "edit <id>"))

    def _cmd_commit(self, arg: str):
        record_id, _, text = arg.partition(" ")
        self.store.commit_edit(self._require(record_id, "commit <id> <text>"), text)

    def _cmd_cancel(self, arg: str):
        self.store.cancel_edit(self._require(arg, "cancel <id>"))

    def _cmd_filter(self, arg: str):
        self.store.set_filter(self._require(arg, "filter <all|active|completed>"))

    def _cmd_stats(self, arg: str) -> str:
        s = self.store.summary
        line = (
            f"  {s['total']} total · {s['active']} active · "
            f"{s['completed']} completed · {s['selected']} selected"
        )
        if s["filter"] != "all" or s["search_term"]:
            line += f"  (filter={s['filter']}, search={s['search_term']!r})"
        return line

    def _cmd_select(self, arg: str):
        self.store.toggle_select(self._require(arg, "select <id>"))

    def _cmd_remove_selected(self, arg: str) -> str:
        return f"  - {self.store.remove_selected()} removed"

    def _cmd_exit(self, arg: str):
        self.finished = True

    def _cmd_log(self, arg: str) -> str:
        if not self.changelog.total_events:
            return "  (no changes)"
        return "\n".join(
            f"  v{e.version:<4} {e.action:<16} {', '.join(e.ids)}"
            for e in self.changelog.entries
        )


# ─────────────────────────────────────────────────────────────
#  Main
# ─────────────────────────────────────────────────────────────

def build_store(args: argparse.Namespace, config: StoreConfig) -> CollectionStore:
    """Create the store from --seed-json and --seed options."""
    if args.seed_json:
        with open(args.seed_json, "r", encoding="utf-8") as f:
            store = CollectionStore.from_payload(json.load(f), config=config)
    else:
        store = CollectionStore(config=config)
    for text in args.seed or []:
        store.add(text)
    return store


def main(argv: list[str] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="listwright",
        description="listwright — interactive collection store shell",
    )
    parser.add_argument("--seed", action="append", metavar="TEXT",
                        help="Add a record before starting (repeatable)")
    parser.add_argument("--seed-json", metavar="PATH",
                        help="Load initial records from a JSON file")
    parser.add_argument("--id-strategy", choices=["counter", "uuid"],
                        help="Id generator (default: $LISTWRIGHT_ID_STRATEGY or counter)")
    parser.add_argument("--id-prefix", help="Prefix for generated ids")
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")
    args = parser.parse_args(argv)

    try:
        env = StoreConfig.from_env()
        config = StoreConfig(
            id_strategy=args.id_strategy or env.id_strategy,
            id_prefix=env.id_prefix if args.id_prefix is None else args.id_prefix,
            log_level=args.log_level or env.log_level,
            changelog_size=env.changelog_size,
        )
        configure_logging(config)
        store = build_store(args, config)
    except (ValidationError, OSError, json.JSONDecodeError) as e:
        print(f"✘ {e}", file=sys.stderr)
        return 1

    Shell(store).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
