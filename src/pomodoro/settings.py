"""Work/break duration settings with clamping and preference persistence."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Optional

from storage import PreferenceStore, load_json_object, save_json

from .constants import (
    BREAK_MINUTES_RANGE,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_WORK_MINUTES,
    PHASE_BREAK,
    SETTINGS_KEY,
    WORK_MINUTES_RANGE,
)


def clamp_minutes(value: Any, bounds: tuple[int, int]) -> int:
    """Clamp user input into `bounds`; non-numeric input maps to the lower bound."""
    low, high = bounds
    if isinstance(value, bool):
        return low
    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(number):
        return low
    if math.isinf(number):
        return high if number > 0 else low
    return max(low, min(high, int(number)))


@dataclass(frozen=True)
class TimerSettings:
    """Durations, in minutes, for the two alternating phases."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "work_minutes",
            clamp_minutes(self.work_minutes, WORK_MINUTES_RANGE),
        )
        object.__setattr__(
            self,
            "break_minutes",
            clamp_minutes(self.break_minutes, BREAK_MINUTES_RANGE),
        )

    def duration_seconds(self, phase: str) -> int:
        if phase == PHASE_BREAK:
            return self.break_minutes * 60
        return self.work_minutes * 60

    def updated(
        self,
        *,
        work_minutes: Any = None,
        break_minutes: Any = None,
    ) -> "TimerSettings":
        changes: dict[str, Any] = {}
        if work_minutes is not None:
            changes["work_minutes"] = work_minutes
        if break_minutes is not None:
            changes["break_minutes"] = break_minutes
        return replace(self, **changes)

    def to_dict(self) -> dict[str, int]:
        return {
            "workMinutes": self.work_minutes,
            "breakMinutes": self.break_minutes,
        }


class TimerSettingsStore:
    """Loads settings once at startup and persists them on every change."""
    def __init__(
        self,
        store: PreferenceStore,
        *,
        key: str = SETTINGS_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._key = key
        self._logger = logger or logging.getLogger("pomodoro.settings")

    def load(self, default: TimerSettings) -> TimerSettings:
        raw = load_json_object(self._store, self._key, logger=self._logger)
        if not raw:
            return default
        return TimerSettings(
            work_minutes=raw.get("workMinutes", default.work_minutes),
            break_minutes=raw.get("breakMinutes", default.break_minutes),
        )

    def save(self, settings: TimerSettings) -> None:
        save_json(self._store, self._key, settings.to_dict(), logger=self._logger)
