import logging
import threading
import unittest
from types import SimpleNamespace

import numpy as np

from notify import (
    PERMISSION_DEFAULT,
    PERMISSION_DENIED,
    PERMISSION_GRANTED,
    VIBRATION_PATTERN_MS,
    CompletionNotifier,
    DesktopNotifier,
    NotificationConfig,
    NotificationConfigurationError,
    NotificationError,
    NotificationUnavailableError,
    synthesize_chime,
)


class _DesktopStub:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.shown: list[tuple[str, str]] = []

    def show(self, title: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.shown.append((title, body))


class _ChimeStub:
    def __init__(self):
        self.played = threading.Event()
        self.sample_rates: list[int] = []

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        self.sample_rates.append(sample_rate_hz)
        self.played.set()


class _PlyerBackendStub:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[dict[str, object]] = []

    def notify(self, **kwargs) -> None:
        if self.error is not None:
            raise self.error
        self.calls.append(kwargs)


def _config(**overrides) -> NotificationConfig:
    values = {"sound_enabled": False}
    values.update(overrides)
    return NotificationConfig(**values)


class CompletionNotifierTests(unittest.TestCase):
    def test_desktop_requires_permission(self) -> None:
        desktop = _DesktopStub()
        notifier = CompletionNotifier(_config(), desktop=desktop)

        self.assertEqual(PERMISSION_DEFAULT, notifier.permission)
        notifier.notify("Pomodoro Complete!", "Time for a break!")
        self.assertEqual([], desktop.shown)

        self.assertEqual(PERMISSION_GRANTED, notifier.request_permission())
        notifier.notify("Pomodoro Complete!", "Time for a break!")
        self.assertEqual([("Pomodoro Complete!", "Time for a break!")], desktop.shown)

    def test_permission_denied_without_desktop_channel(self) -> None:
        notifier = CompletionNotifier(_config(desktop_enabled=False), desktop=_DesktopStub())
        self.assertEqual(PERMISSION_DENIED, notifier.request_permission())

    def test_unavailable_platform_degrades_to_denied(self) -> None:
        desktop = _DesktopStub(NotificationUnavailableError("no backend"))
        notifier = CompletionNotifier(
            _config(),
            desktop=desktop,
            logger=logging.getLogger("test.notify"),
        )
        notifier.request_permission()
        with self.assertLogs("test.notify", level="INFO"):
            notifier.notify("Break Over!", "Time to focus now.")
        self.assertEqual(PERMISSION_DENIED, notifier.permission)

    def test_desktop_failure_is_logged_not_raised(self) -> None:
        notifier = CompletionNotifier(
            _config(),
            desktop=_DesktopStub(NotificationError("dbus hiccup")),
            logger=logging.getLogger("test.notify"),
        )
        notifier.request_permission()
        with self.assertLogs("test.notify", level="WARNING"):
            notifier.notify("t", "b")
        self.assertEqual(PERMISSION_GRANTED, notifier.permission)

    def test_celebrate_receives_vibration_pattern(self) -> None:
        received = []
        notifier = CompletionNotifier(
            _config(desktop_enabled=False),
            celebrate=lambda title, body, pattern: received.append((title, body, pattern)),
        )
        notifier.notify("Pomodoro Complete!", "Time for a break!")
        self.assertEqual(
            [("Pomodoro Complete!", "Time for a break!", VIBRATION_PATTERN_MS)],
            received,
        )

    def test_celebrate_disabled_is_skipped(self) -> None:
        received = []
        notifier = CompletionNotifier(
            _config(celebrate_enabled=False),
            celebrate=lambda *args: received.append(args),
        )
        notifier.notify("t", "b")
        self.assertEqual([], received)

    def test_chime_plays_on_worker_thread(self) -> None:
        chime = _ChimeStub()
        notifier = CompletionNotifier(
            NotificationConfig(desktop_enabled=False, sample_rate_hz=8000),
            chime_output=chime,
        )
        try:
            notifier.notify("t", "b")
            self.assertTrue(chime.played.wait(2.0))
            self.assertEqual([8000], chime.sample_rates)
        finally:
            notifier.close()

    def test_notify_after_close_skips_chime(self) -> None:
        chime = _ChimeStub()
        notifier = CompletionNotifier(
            NotificationConfig(desktop_enabled=False),
            chime_output=chime,
        )
        notifier.close()
        notifier.notify("t", "b")
        self.assertFalse(chime.played.is_set())


class DesktopNotifierTests(unittest.TestCase):
    def test_show_forwards_to_backend(self) -> None:
        backend = _PlyerBackendStub()
        DesktopNotifier(app_name="Study Tracker", backend=backend).show("T", "B")
        self.assertEqual(
            [{"title": "T", "message": "B", "app_name": "Study Tracker", "timeout": 5}],
            backend.calls,
        )

    def test_missing_platform_backend_raises_unavailable(self) -> None:
        notifier = DesktopNotifier(
            app_name="Study Tracker",
            backend=_PlyerBackendStub(NotImplementedError()),
        )
        with self.assertRaises(NotificationUnavailableError):
            notifier.show("T", "B")

    def test_other_backend_errors_raise_notification_error(self) -> None:
        notifier = DesktopNotifier(
            app_name="Study Tracker",
            backend=_PlyerBackendStub(RuntimeError("boom")),
        )
        with self.assertRaises(NotificationError):
            notifier.show("T", "B")


class NotificationConfigTests(unittest.TestCase):
    def test_from_settings_maps_fields(self) -> None:
        settings = SimpleNamespace(
            desktop_enabled=False,
            sound_enabled=True,
            celebrate_enabled=False,
            app_name=" Focus ",
            sample_rate_hz=16000,
            output_device=3,
        )
        config = NotificationConfig.from_settings(settings)
        self.assertFalse(config.desktop_enabled)
        self.assertEqual("Focus", config.app_name)
        self.assertEqual(16000, config.sample_rate_hz)
        self.assertEqual(3, config.output_device_index)

    def test_invalid_sample_rate_rejected(self) -> None:
        with self.assertRaises(NotificationConfigurationError):
            NotificationConfig(sample_rate_hz=0)


class SynthesizeChimeTests(unittest.TestCase):
    def test_chime_is_mono_float32_and_bounded(self) -> None:
        wav = synthesize_chime(8000, tone_seconds=0.1)
        self.assertEqual(np.float32, wav.dtype)
        self.assertEqual(1, wav.ndim)
        self.assertEqual(1600, len(wav))
        self.assertLessEqual(float(np.max(np.abs(wav))), 0.4 + 1e-6)


if __name__ == "__main__":
    unittest.main()
