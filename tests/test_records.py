"""
listwright Test Suite — Records, Ids and Seed Payloads
======================================================

Usage:
    python -m pytest tests/test_records.py -v
"""
import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from listwright.records import (
    Record, Priority, FilterKind, clean_text, coerce_priority, coerce_filter,
)
from listwright.ids import CounterIds, UuidIds, make_id_generator
from listwright.payloads import parse_seed, RecordIn
from listwright.errors import ValidationError


# ─────────────────────────────────────────────
#  Record Tests
# ─────────────────────────────────────────────

class TestRecord(unittest.TestCase):

    def test_defaults(self):
        record = Record(id="1", text="A")
        self.assertFalse(record.completed)
        self.assertIsNone(record.priority)
        self.assertFalse(record.editing)

    def test_frozen(self):
        record = Record(id="1", text="A")
        with self.assertRaises(AttributeError):
            record.completed = True

    def test_updates_return_new_records(self):
        record = Record(id="1", text="A", editing=True)
        toggled = record.toggled()
        self.assertTrue(toggled.completed)
        self.assertFalse(record.completed)
        renamed = record.with_text("B")
        self.assertEqual(renamed.text, "B")
        self.assertFalse(renamed.editing)
        self.assertEqual(renamed.id, "1")

    def test_matches_search(self):
        record = Record(id="1", text="Straße Alpha")
        self.assertTrue(record.matches_search("alp"))
        self.assertTrue(record.matches_search("STRASSE"))
        self.assertTrue(record.matches_search(""))
        self.assertFalse(record.matches_search("beta"))

    def test_dict_roundtrip(self):
        record = Record(id="9", text="A", completed=True, priority=Priority.MEDIUM)
        data = record.to_dict()
        self.assertEqual(data["priority"], "medium")
        self.assertEqual(Record.from_dict(data), record)

    def test_from_dict_ignores_unknown_keys(self):
        record = Record.from_dict({"id": 4, "text": " A ", "color": "red"})
        self.assertEqual(record.id, "4")
        self.assertEqual(record.text, "A")

    def test_from_dict_requires_id(self):
        with self.assertRaises(ValidationError):
            Record.from_dict({"text": "A"})


class TestFilterKind(unittest.TestCase):

    def test_matches(self):
        done = Record(id="1", text="A", completed=True)
        todo = Record(id="2", text="B")
        self.assertTrue(FilterKind.ALL.matches(done))
        self.assertTrue(FilterKind.ACTIVE.matches(todo))
        self.assertFalse(FilterKind.ACTIVE.matches(done))
        self.assertTrue(FilterKind.COMPLETED.matches(done))
        self.assertFalse(FilterKind.COMPLETED.matches(todo))


class TestCoercion(unittest.TestCase):

    def test_clean_text(self):
        self.assertEqual(clean_text("  hi "), "hi")
        with self.assertRaises(ValidationError):
            clean_text("")
        with self.assertRaises(ValidationError):
            clean_text(12)

    def test_coerce_priority(self):
        self.assertIsNone(coerce_priority(None))
        self.assertEqual(coerce_priority(" HIGH"), Priority.HIGH)
        self.assertIs(coerce_priority(Priority.LOW), Priority.LOW)
        with self.assertRaises(ValidationError):
            coerce_priority("urgent")
        with self.assertRaises(ValidationError):
            coerce_priority(1)

    def test_coerce_filter(self):
        self.assertIs(coerce_filter("Active"), FilterKind.ACTIVE)
        self.assertIs(coerce_filter(FilterKind.ALL), FilterKind.ALL)
        with self.assertRaises(ValidationError) as ctx:
            coerce_filter("done")
        self.assertIn("completed", str(ctx.exception))


# ─────────────────────────────────────────────
#  Id Generator Tests
# ─────────────────────────────────────────────

class TestIds(unittest.TestCase):

    def test_counter(self):
        ids = CounterIds(prefix="t")
        self.assertEqual([ids(), ids(), ids()], ["t1", "t2", "t3"])

    def test_counter_start(self):
        self.assertEqual(CounterIds(start=10)(), "10")

    def test_uuid_unique(self):
        ids = UuidIds(prefix="r-")
        values = {ids() for _ in range(50)}
        self.assertEqual(len(values), 50)
        self.assertTrue(all(v.startswith("r-") for v in values))

    def test_make_id_generator(self):
        self.assertIsInstance(make_id_generator("counter"), CounterIds)
        self.assertIsInstance(make_id_generator("uuid"), UuidIds)
        with self.assertRaises(ValidationError):
            make_id_generator("sequence")


# ─────────────────────────────────────────────
#  Seed Payload Tests
# ─────────────────────────────────────────────

class TestPayloads(unittest.TestCase):

    def test_bare_list(self):
        seed = parse_seed(["A", {"text": "B"}])
        self.assertEqual(seed.records[0], "A")
        self.assertIsInstance(seed.records[1], RecordIn)
        self.assertEqual(seed.filter, FilterKind.ALL)

    def test_record_fields(self):
        seed = parse_seed([{"id": 5, "text": " B ", "priority": "High", "extra": 1}])
        item = seed.records[0]
        self.assertEqual(item.id, "5")
        self.assertEqual(item.text, "B")
        self.assertEqual(item.priority, Priority.HIGH)

    def test_blank_text_rejected(self):
        with self.assertRaises(ValidationError):
            parse_seed([{"text": "  "}])

    def test_unknown_priority_rejected(self):
        with self.assertRaises(ValidationError):
            parse_seed([{"text": "A", "priority": "urgent"}])

    def test_not_a_mapping(self):
        with self.assertRaises(ValidationError):
            parse_seed(42)


if __name__ == "__main__":
    unittest.main()
