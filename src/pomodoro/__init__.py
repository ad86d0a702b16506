from .records import Session, Task, TimeIdFactory
from .scheduler import IntervalScheduler, ScheduledHandle, ThreadedIntervalScheduler
from .service import (
    PomodoroAction,
    PomodoroActionResult,
    PomodoroEngine,
    PomodoroSnapshot,
    PomodoroTick,
    TimerPhase,
)
from .sessions import SessionLog
from .settings import TimerSettings, TimerSettingsStore, clamp_minutes
from .tasks import TaskBook

__all__ = [
    "IntervalScheduler",
    "PomodoroAction",
    "PomodoroActionResult",
    "PomodoroEngine",
    "PomodoroSnapshot",
    "PomodoroTick",
    "ScheduledHandle",
    "Session",
    "SessionLog",
    "Task",
    "TaskBook",
    "ThreadedIntervalScheduler",
    "TimeIdFactory",
    "TimerPhase",
    "TimerSettings",
    "TimerSettingsStore",
    "clamp_minutes",
]
