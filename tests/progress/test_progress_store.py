import datetime as dt
import json
import logging
import tempfile
import unittest
from pathlib import Path

from progress import (
    InMemoryProgressStore,
    PreferenceProgressStore,
    ProgressRecord,
    clamp_percentage,
    clamp_understanding,
)
from storage import InMemoryPreferenceStore, JsonFilePreferenceStore

_FIXED_NOW = dt.datetime(2026, 3, 2, 9, 0, tzinfo=dt.timezone.utc)


class _Clock:
    def __init__(self):
        self._now = dt.datetime(2026, 3, 2, 9, 0, tzinfo=dt.timezone.utc)

    def __call__(self) -> dt.datetime:
        self._now += dt.timedelta(minutes=1)
        return self._now


class InMemoryProgressStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryProgressStore(now_fn=_Clock())

    def test_subscribe_delivers_initial_snapshot(self) -> None:
        self.store.add("u1", subject="Math", topic="Limits", percentage=40)
        snapshots = []
        self.store.subscribe("u1", snapshots.append)

        self.assertEqual(1, len(snapshots))
        self.assertEqual(["Math"], [record.subject for record in snapshots[0]])

    def test_snapshots_are_newest_first_and_user_scoped(self) -> None:
        snapshots = []
        self.store.subscribe("u1", snapshots.append)
        self.store.add("u1", subject="Math")
        self.store.add("u2", subject="Chemistry")
        self.store.add("u1", subject="History")

        self.assertEqual(3, len(snapshots))
        self.assertEqual(["History", "Math"], [r.subject for r in snapshots[-1]])

    def test_same_timestamp_keeps_newest_first(self) -> None:
        store = InMemoryProgressStore(now_fn=lambda: _FIXED_NOW)
        for index in range(1, 12):
            store.add("u1", subject=f"S{index}")

        subjects = [record.subject for record in store.records("u1")]
        self.assertEqual([f"S{index}" for index in range(11, 0, -1)], subjects)

    def test_delete_redelivers_snapshot(self) -> None:
        snapshots = []
        record_id = self.store.add("u1", subject="Math")
        self.store.subscribe("u1", snapshots.append)

        self.assertTrue(self.store.delete(record_id))
        self.assertEqual([], snapshots[-1])
        self.assertFalse(self.store.delete(record_id))

    def test_cancelled_subscription_receives_nothing(self) -> None:
        snapshots = []
        subscription = self.store.subscribe("u1", snapshots.append)
        subscription.cancel()
        self.store.add("u1", subject="Math")

        self.assertEqual(1, len(snapshots))

    def test_values_are_clamped(self) -> None:
        self.store.add("u1", subject=" Physics ", percentage=150, understanding=9)
        record = self.store.records("u1")[0]

        self.assertEqual("Physics", record.subject)
        self.assertEqual(100.0, record.percentage)
        self.assertEqual(5, record.understanding)

    def test_subject_and_uid_required(self) -> None:
        with self.assertRaises(ValueError):
            self.store.add("u1", subject="   ")
        with self.assertRaises(ValueError):
            self.store.add("", subject="Math")

    def test_failing_subscriber_does_not_block_others(self) -> None:
        def broken(_records) -> None:
            raise RuntimeError("listener down")

        snapshots = []
        with self.assertLogs("progress", level="ERROR"):
            self.store.subscribe("u1", broken)
        self.store.subscribe("u1", snapshots.append)
        with self.assertLogs("progress", level="ERROR"):
            self.store.add("u1", subject="Math")

        self.assertEqual(["Math"], [r.subject for r in snapshots[-1]])

    def test_record_serializes_created_at(self) -> None:
        self.store.add("u1", subject="Math", notes="ch. 3")
        payload = self.store.records("u1")[0].to_dict()
        self.assertEqual("2026-03-02T09:01:00+00:00", payload["createdAt"])
        self.assertEqual("ch. 3", payload["notes"])


class PreferenceProgressStoreTests(unittest.TestCase):
    def test_records_survive_reopen_of_preference_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "preferences.json"
            store = PreferenceProgressStore(
                JsonFilePreferenceStore(path),
                key="progress_records-u1",
                now_fn=lambda: _FIXED_NOW,
            )
            first = store.add("u1", subject="Math", topic="Limits", percentage=40)
            store.add("u1", subject="History", understanding=5)
            store.delete(first)
            store.add("u1", subject="Chemistry")

            reopened = PreferenceProgressStore(
                JsonFilePreferenceStore(path),
                key="progress_records-u1",
                now_fn=lambda: _FIXED_NOW,
            )
            snapshots = []
            reopened.subscribe("u1", snapshots.append)

            self.assertEqual(["Chemistry", "History"], [r.subject for r in snapshots[0]])
            self.assertEqual(5, snapshots[0][1].understanding)
            self.assertEqual(_FIXED_NOW, snapshots[0][0].created_at)

            new_id = reopened.add("u1", subject="Biology")
            self.assertNotIn(new_id, {r.id for r in snapshots[0]})
            self.assertEqual("Biology", reopened.records("u1")[0].subject)

    def test_each_mutation_is_persisted(self) -> None:
        preferences = InMemoryPreferenceStore()
        store = PreferenceProgressStore(preferences, now_fn=lambda: _FIXED_NOW)
        record_id = store.add("u1", subject="Math")

        stored = json.loads(preferences.get("progress_records"))
        self.assertEqual([record_id], [item["id"] for item in stored])
        self.assertEqual(1, stored[0]["seq"])

        store.delete(record_id)
        self.assertEqual([], json.loads(preferences.get("progress_records")))

    def test_malformed_entries_are_skipped(self) -> None:
        stamp = "2026-03-02T09:00:00+00:00"
        entries = [
            {"id": "progress-1", "uid": "u1", "subject": "Math", "createdAt": stamp, "seq": 1},
            {"id": "progress-2", "uid": "u1", "subject": "", "createdAt": stamp, "seq": 2},
            {"id": "progress-3", "uid": "u1", "subject": "Art", "createdAt": "yesterday"},
            "garbage",
        ]
        preferences = InMemoryPreferenceStore({"progress_records": json.dumps(entries)})
        with self.assertLogs("test.progress", level="WARNING"):
            store = PreferenceProgressStore(
                preferences,
                logger=logging.getLogger("test.progress"),
            )
        self.assertEqual(["Math"], [r.subject for r in store.records("u1")])


class ProgressRecordTests(unittest.TestCase):
    def test_naive_timestamp_is_read_as_utc(self) -> None:
        record = ProgressRecord.from_dict(
            {"id": "p", "uid": "u1", "subject": "Math", "createdAt": "2026-03-02T09:00:00"}
        )
        self.assertEqual(dt.timezone.utc, record.created_at.tzinfo)
        self.assertEqual(3, record.understanding)
        self.assertEqual(0, record.seq)


class ClampTests(unittest.TestCase):
    def test_percentage(self) -> None:
        self.assertEqual(0.0, clamp_percentage(-5))
        self.assertEqual(55.5, clamp_percentage("55.5"))
        self.assertEqual(0.0, clamp_percentage("n/a"))

    def test_understanding(self) -> None:
        self.assertEqual(1, clamp_understanding(0))
        self.assertEqual(3, clamp_understanding(None))
        self.assertEqual(4, clamp_understanding("4"))


if __name__ == "__main__":
    unittest.main()
