import logging
import unittest

from pomodoro import TimerSettings, TimerSettingsStore, clamp_minutes
from pomodoro.constants import BREAK_MINUTES_RANGE, WORK_MINUTES_RANGE
from storage import InMemoryPreferenceStore


class ClampMinutesTests(unittest.TestCase):
    def test_values_inside_range_are_kept(self) -> None:
        self.assertEqual(25, clamp_minutes(25, WORK_MINUTES_RANGE))
        self.assertEqual(30, clamp_minutes("30", WORK_MINUTES_RANGE))

    def test_out_of_range_values_snap_to_bounds(self) -> None:
        self.assertEqual(1, clamp_minutes(0, WORK_MINUTES_RANGE))
        self.assertEqual(60, clamp_minutes(90, WORK_MINUTES_RANGE))
        self.assertEqual(30, clamp_minutes(45, BREAK_MINUTES_RANGE))
        self.assertEqual(1, clamp_minutes(-3, BREAK_MINUTES_RANGE))

    def test_non_numeric_input_maps_to_lower_bound(self) -> None:
        for value in ("abc", "", None, True, float("nan"), [5]):
            with self.subTest(value=value):
                self.assertEqual(1, clamp_minutes(value, WORK_MINUTES_RANGE))

    def test_infinite_input_snaps_to_matching_bound(self) -> None:
        self.assertEqual(60, clamp_minutes(float("inf"), WORK_MINUTES_RANGE))
        self.assertEqual(1, clamp_minutes(float("-inf"), WORK_MINUTES_RANGE))


class TimerSettingsTests(unittest.TestCase):
    def test_defaults_and_durations(self) -> None:
        settings = TimerSettings()
        self.assertEqual(1500, settings.duration_seconds("work"))
        self.assertEqual(300, settings.duration_seconds("break"))

    def test_constructor_clamps(self) -> None:
        settings = TimerSettings(work_minutes=0, break_minutes=99)
        self.assertEqual(1, settings.work_minutes)
        self.assertEqual(30, settings.break_minutes)

    def test_updated_only_changes_given_fields(self) -> None:
        settings = TimerSettings(work_minutes=30, break_minutes=10)
        updated = settings.updated(break_minutes=7)
        self.assertEqual(30, updated.work_minutes)
        self.assertEqual(7, updated.break_minutes)


class TimerSettingsStoreTests(unittest.TestCase):
    def test_missing_value_returns_default(self) -> None:
        store = TimerSettingsStore(
            InMemoryPreferenceStore(),
            logger=logging.getLogger("test.settings"),
        )
        default = TimerSettings(work_minutes=20, break_minutes=4)
        self.assertEqual(default, store.load(default))

    def test_malformed_value_returns_default(self) -> None:
        store = TimerSettingsStore(
            InMemoryPreferenceStore({"pomodoro_settings": "{not json"}),
            logger=logging.getLogger("test.settings"),
        )
        with self.assertLogs("test.settings", level="WARNING"):
            loaded = store.load(TimerSettings())
        self.assertEqual(TimerSettings(), loaded)

    def test_save_then_load_round_trips_under_custom_key(self) -> None:
        backing = InMemoryPreferenceStore()
        store = TimerSettingsStore(backing, key="pomodoro_settings-u1")
        store.save(TimerSettings(work_minutes=45, break_minutes=15))

        self.assertIsNotNone(backing.get("pomodoro_settings-u1"))
        self.assertEqual(
            TimerSettings(work_minutes=45, break_minutes=15),
            store.load(TimerSettings()),
        )

    def test_stored_out_of_range_values_are_clamped(self) -> None:
        backing = InMemoryPreferenceStore(
            {"pomodoro_settings": '{"workMinutes": 600, "breakMinutes": "x"}'}
        )
        loaded = TimerSettingsStore(backing).load(TimerSettings())
        self.assertEqual(60, loaded.work_minutes)
        self.assertEqual(1, loaded.break_minutes)


if __name__ == "__main__":
    unittest.main()
