"""Session and task records plus their JSON mapping."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Optional

SessionType = Literal["work", "break"]

_SESSION_TYPES = ("work", "break")


@dataclass(frozen=True)
class Session:
    """One completed work or break phase."""
    id: str
    date: str
    type: SessionType
    duration_seconds: int
    task_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "type": self.type,
            "duration": self.duration_seconds,
            "taskId": self.task_id,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional["Session"]:
        """Build a session from stored JSON; returns None for malformed entries."""
        session_id = raw.get("id")
        date = raw.get("date")
        session_type = raw.get("type")
        duration = raw.get("duration")
        task_id = raw.get("taskId")
        if not isinstance(session_id, str) or not session_id:
            return None
        if not isinstance(date, str) or session_type not in _SESSION_TYPES:
            return None
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 0:
            return None
        if task_id is not None and not isinstance(task_id, str):
            return None
        return cls(
            id=session_id,
            date=date,
            type=session_type,
            duration_seconds=duration,
            task_id=task_id,
        )


@dataclass(frozen=True)
class Task:
    """To-do item with a count of completed pomodoros attributed to it."""
    id: str
    title: str
    completed: bool = False
    pomodoro_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "pomodoroCount": self.pomodoro_count,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional["Task"]:
        task_id = raw.get("id")
        title = raw.get("title")
        if not isinstance(task_id, str) or not task_id:
            return None
        if not isinstance(title, str) or not title.strip():
            return None
        count = raw.get("pomodoroCount", 0)
        # Older entries were written without a counter.
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            count = 0
        return cls(
            id=task_id,
            title=title.strip(),
            completed=bool(raw.get("completed", False)),
            pomodoro_count=count,
        )


class TimeIdFactory:
    """Millisecond-timestamp ids, bumped when two are minted in the same tick."""
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)
