"""Repeating-callback scheduling used to drive the countdown tick."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol


class ScheduledHandle(Protocol):
    def cancel(self) -> None:
        ...


class IntervalScheduler(Protocol):
    """Runs `callback` every `interval_seconds` until the handle is cancelled."""
    def schedule(
        self,
        callback: Callable[[], None],
        interval_seconds: float,
    ) -> ScheduledHandle:
        ...


class _ThreadHandle:
    def __init__(self, thread: threading.Thread, stop: threading.Event):
        self._thread = thread
        self._stop = stop

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()

    def cancel(self) -> None:
        # Never blocks; a callback already in flight finishes on its own.
        self._stop.set()

    def join(self, timeout_seconds: float) -> None:
        # The loop thread may be torn down from inside its own callback.
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout_seconds)


class ThreadedIntervalScheduler:
    """One daemon thread per scheduled interval, stopped via an event.

    `cancel()` on a handle only signals the thread. `close()` is the teardown
    step that also waits for outstanding threads to exit.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("pomodoro.scheduler")
        self._lock = threading.Lock()
        self._handles: list[_ThreadHandle] = []

    def schedule(
        self,
        callback: Callable[[], None],
        interval_seconds: float,
    ) -> _ThreadHandle:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        stop = threading.Event()

        def run() -> None:
            while not stop.wait(interval_seconds):
                try:
                    callback()
                except Exception as error:
                    self._logger.error("Scheduled tick failed: %s", error, exc_info=True)

        thread = threading.Thread(target=run, daemon=True, name="pomodoro-tick")
        thread.start()
        handle = _ThreadHandle(thread, stop)
        with self._lock:
            self._handles = [item for item in self._handles if item.alive]
            self._handles.append(handle)
        return handle

    def close(self, timeout_seconds: float = 1.0) -> None:
        """Cancel every outstanding interval and wait for its thread to exit."""
        with self._lock:
            handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
        for handle in handles:
            handle.join(timeout_seconds)
