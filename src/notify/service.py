"""Completion notifier fanning one alert out to desktop, sound, and UI."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Callable, Optional, Protocol

import numpy as np

from .chime import synthesize_chime
from .config import NotificationConfig
from .errors import NotificationError, NotificationUnavailableError

PERMISSION_DEFAULT = "default"
PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"

VIBRATION_PATTERN_MS: tuple[int, ...] = (200, 100, 200)


class DesktopNotifierLike(Protocol):
    def show(self, title: str, body: str) -> None:
        ...


class ChimeOutputLike(Protocol):
    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        ...


CelebrateCallback = Callable[[str, str, tuple[int, ...]], None]


class CompletionNotifier:
    """Best-effort alerts; every channel failure is logged and swallowed.

    Desktop alerts require `request_permission()` to have granted access;
    a platform without a backend flips the permission to denied on first use.
    Chime playback runs on a single worker thread so ticks are never blocked.
    """

    def __init__(
        self,
        config: NotificationConfig,
        *,
        desktop: Optional[DesktopNotifierLike] = None,
        chime_output: Optional[ChimeOutputLike] = None,
        celebrate: Optional[CelebrateCallback] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._desktop = desktop if config.desktop_enabled else None
        self._chime_output = chime_output if config.sound_enabled else None
        self._celebrate = celebrate if config.celebrate_enabled else None
        self._logger = logger or logging.getLogger("notify")
        self._permission = PERMISSION_DEFAULT
        self._lock = threading.Lock()
        self._chime: Optional[np.ndarray] = None
        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
        if self._chime_output is not None:
            self._chime = synthesize_chime(config.sample_rate_hz)
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix="chime",
            )

    @property
    def permission(self) -> str:
        with self._lock:
            return self._permission

    def request_permission(self) -> str:
        """Resolve desktop permission once; later calls return the cached answer."""
        with self._lock:
            if self._permission == PERMISSION_DEFAULT:
                self._permission = (
                    PERMISSION_GRANTED if self._desktop is not None else PERMISSION_DENIED
                )
                self._logger.info("Desktop notification permission: %s", self._permission)
            return self._permission

    def notify(self, title: str, body: str) -> None:
        self._show_desktop(title, body)
        self._send_celebrate(title, body)
        self._play_chime()

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _show_desktop(self, title: str, body: str) -> None:
        if self._desktop is None or self.permission != PERMISSION_GRANTED:
            return
        try:
            self._desktop.show(title, body)
        except NotificationUnavailableError as error:
            with self._lock:
                self._permission = PERMISSION_DENIED
            self._logger.info("Desktop notifications disabled: %s", error)
        except NotificationError as error:
            self._logger.warning("Desktop notification failed: %s", error)

    def _send_celebrate(self, title: str, body: str) -> None:
        if self._celebrate is None:
            return
        try:
            self._celebrate(title, body, VIBRATION_PATTERN_MS)
        except Exception as error:
            self._logger.warning("Celebrate event failed: %s", error)

    def _play_chime(self) -> None:
        executor = self._executor
        if executor is None or self._chime_output is None or self._chime is None:
            return
        try:
            future = executor.submit(
                self._chime_output.play,
                self._chime,
                self._config.sample_rate_hz,
            )
        except RuntimeError:
            # Executor already shut down.
            return
        future.add_done_callback(self._log_chime_failure)

    def _log_chime_failure(self, future: concurrent.futures.Future[None]) -> None:
        error = future.exception()
        if error is not None:
            self._logger.warning("Chime playback failed: %s", error)
