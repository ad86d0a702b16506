"""Thread-safe work/break countdown state machine."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Literal, Optional

from .constants import (
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SELECT_TASK,
    ACTION_START,
    ACTION_UPDATE_SETTINGS,
    COMPLETION_MESSAGES,
    NEXT_PHASE,
    PHASE_WORK,
    REASON_ALREADY_RUNNING,
    REASON_CLOSED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_SETTINGS_UPDATED,
    REASON_STARTED,
    REASON_TASK_CLEARED,
    REASON_TASK_SELECTED,
    REASON_UNKNOWN_TASK,
    TICK_INTERVAL_SECONDS,
)
from .contracts import NotificationSinkLike
from .records import Session, Task
from .scheduler import IntervalScheduler, ScheduledHandle
from .sessions import SessionLog
from .settings import TimerSettings, TimerSettingsStore
from .tasks import TaskBook

TimerPhase = Literal["work", "break"]
PomodoroAction = Literal["start", "pause", "reset", "select_task", "update_settings"]


@dataclass(frozen=True)
class PomodoroSnapshot:
    """Immutable engine snapshot exposed to runtime and UI publishers."""
    phase: TimerPhase
    running: bool
    remaining_seconds: int
    duration_seconds: int
    work_minutes: int
    break_minutes: int
    selected_task_id: Optional[str] = None

    @property
    def state(self) -> str:
        return f"{'running' if self.running else 'idle'}-{self.phase}"


@dataclass(frozen=True)
class PomodoroActionResult:
    """Result envelope returned after applying a user action."""
    action: PomodoroAction
    accepted: bool
    reason: str
    snapshot: PomodoroSnapshot


@dataclass(frozen=True)
class PomodoroTick:
    """Tick payload emitted once per second while running."""
    snapshot: PomodoroSnapshot
    completed: bool = False
    completed_phase: Optional[TimerPhase] = None
    session: Optional[Session] = None
    task: Optional[Task] = None


class PomodoroEngine:
    """Alternating work/break countdown with session and task bookkeeping.

    The engine never schedules anything by itself when no scheduler is
    given; callers then drive it through `tick()`.
    """

    def __init__(
        self,
        *,
        sessions: SessionLog,
        tasks: TaskBook,
        settings: Optional[TimerSettings] = None,
        settings_store: Optional[TimerSettingsStore] = None,
        notifier: Optional[NotificationSinkLike] = None,
        scheduler: Optional[IntervalScheduler] = None,
        on_tick: Optional[Callable[[PomodoroTick], None]] = None,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be greater than zero")

        self._sessions = sessions
        self._tasks = tasks
        self._settings_store = settings_store
        self._notifier = notifier
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._tick_interval_seconds = float(tick_interval_seconds)
        self._logger = logger or logging.getLogger("pomodoro")
        self._lock = threading.Lock()

        base_settings = settings or TimerSettings()
        if settings_store is not None:
            base_settings = settings_store.load(base_settings)
        self._settings = base_settings

        self._phase: TimerPhase = PHASE_WORK
        self._running = False
        self._closed = False
        self._remaining_seconds = self._settings.duration_seconds(self._phase)
        self._selected_task_id: Optional[str] = None
        self._generation = 0
        self._handle: Optional[ScheduledHandle] = None

    @property
    def settings(self) -> TimerSettings:
        with self._lock:
            return self._settings

    def snapshot(self) -> PomodoroSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def start(self) -> PomodoroActionResult:
        with self._lock:
            if self._closed:
                return self._result_locked(ACTION_START, False, REASON_CLOSED)
            if self._running:
                return self._result_locked(ACTION_START, False, REASON_ALREADY_RUNNING)

            self._running = True
            self._generation += 1
            if self._scheduler is not None:
                self._handle = self._scheduler.schedule(
                    partial(self._scheduled_tick, self._generation),
                    self._tick_interval_seconds,
                )
            self._logger.info(
                "Timer started: phase=%s remaining=%ss",
                self._phase,
                self._remaining_seconds,
            )
            return self._result_locked(ACTION_START, True, REASON_STARTED)

    def pause(self) -> PomodoroActionResult:
        with self._lock:
            if not self._running:
                return self._result_locked(ACTION_PAUSE, False, REASON_NOT_RUNNING)

            self._running = False
            handle = self._detach_handle_locked()
            self._logger.info(
                "Timer paused: phase=%s remaining=%ss",
                self._phase,
                self._remaining_seconds,
            )
            result = self._result_locked(ACTION_PAUSE, True, REASON_PAUSED)
        self._cancel(handle)
        return result

    def reset(self) -> PomodoroActionResult:
        with self._lock:
            self._running = False
            handle = self._detach_handle_locked()
            self._remaining_seconds = self._settings.duration_seconds(self._phase)
            self._logger.info("Timer reset: phase=%s", self._phase)
            result = self._result_locked(ACTION_RESET, True, REASON_RESET)
        self._cancel(handle)
        return result

    def select_task(self, task_id: Optional[str]) -> PomodoroActionResult:
        with self._lock:
            if task_id is None:
                self._selected_task_id = None
                return self._result_locked(ACTION_SELECT_TASK, True, REASON_TASK_CLEARED)
            if self._tasks.get(task_id) is None:
                return self._result_locked(ACTION_SELECT_TASK, False, REASON_UNKNOWN_TASK)
            self._selected_task_id = task_id
            return self._result_locked(ACTION_SELECT_TASK, True, REASON_TASK_SELECTED)

    def drop_task_selection(self, task_id: str) -> Optional[PomodoroActionResult]:
        """Clear the selection if it points at `task_id`; None when it did not."""
        with self._lock:
            if self._selected_task_id != task_id:
                return None
            self._selected_task_id = None
            return self._result_locked(ACTION_SELECT_TASK, True, REASON_TASK_CLEARED)

    def update_settings(
        self,
        *,
        work_minutes: Any = None,
        break_minutes: Any = None,
    ) -> PomodoroActionResult:
        """Apply clamped durations; an idle countdown picks them up at once."""
        with self._lock:
            self._settings = self._settings.updated(
                work_minutes=work_minutes,
                break_minutes=break_minutes,
            )
            if not self._running:
                self._remaining_seconds = self._settings.duration_seconds(self._phase)
            settings = self._settings
            result = self._result_locked(
                ACTION_UPDATE_SETTINGS,
                True,
                REASON_SETTINGS_UPDATED,
            )
        if self._settings_store is not None:
            self._settings_store.save(settings)
        self._logger.info(
            "Timer settings updated: work=%smin break=%smin",
            settings.work_minutes,
            settings.break_minutes,
        )
        return result

    def tick(self) -> Optional[PomodoroTick]:
        """Advance the countdown by one second; ignored unless running."""
        with self._lock:
            tick = self._tick_locked()
        if tick is not None:
            self._after_tick(tick)
        return tick

    def close(self) -> None:
        """Stop the engine for good; no tick may run after this returns."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._running = False
            handle = self._detach_handle_locked()
        self._cancel(handle)
        self._logger.debug("Timer engine closed")

    def _scheduled_tick(self, generation: int) -> None:
        with self._lock:
            # A pause/reset/close bumps the generation; late ticks are dropped.
            if generation != self._generation:
                return
            tick = self._tick_locked()
        if tick is not None:
            self._after_tick(tick)

    def _tick_locked(self) -> Optional[PomodoroTick]:
        if not self._running or self._closed:
            return None

        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        if self._remaining_seconds > 0:
            return PomodoroTick(snapshot=self._snapshot_locked())

        completed_phase = self._phase
        duration_seconds = self._settings.duration_seconds(completed_phase)
        session = self._sessions.record(
            completed_phase,
            duration_seconds,
            self._selected_task_id,
        )
        task = None
        if completed_phase == PHASE_WORK and self._selected_task_id is not None:
            task = self._tasks.increment_pomodoro(self._selected_task_id)

        self._phase = NEXT_PHASE[completed_phase]  # type: ignore[assignment]
        self._remaining_seconds = self._settings.duration_seconds(self._phase)
        self._logger.info(
            "Phase completed: %s -> %s (next %ss)",
            completed_phase,
            self._phase,
            self._remaining_seconds,
        )
        return PomodoroTick(
            snapshot=self._snapshot_locked(),
            completed=True,
            completed_phase=completed_phase,
            session=session,
            task=task,
        )

    def _after_tick(self, tick: PomodoroTick) -> None:
        if tick.completed and tick.completed_phase is not None and self._notifier:
            title, body = COMPLETION_MESSAGES[tick.completed_phase]
            try:
                self._notifier.notify(title, body)
            except Exception as error:
                self._logger.warning("Completion notification failed: %s", error)

        if self._on_tick is not None:
            try:
                self._on_tick(tick)
            except Exception as error:
                self._logger.error("Tick listener failed: %s", error, exc_info=True)

    def _detach_handle_locked(self) -> Optional[ScheduledHandle]:
        self._generation += 1
        handle = self._handle
        self._handle = None
        return handle

    @staticmethod
    def _cancel(handle: Optional[ScheduledHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def _result_locked(
        self,
        action: PomodoroAction,
        accepted: bool,
        reason: str,
    ) -> PomodoroActionResult:
        return PomodoroActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
        )

    def _snapshot_locked(self) -> PomodoroSnapshot:
        return PomodoroSnapshot(
            phase=self._phase,
            running=self._running,
            remaining_seconds=self._remaining_seconds,
            duration_seconds=self._settings.duration_seconds(self._phase),
            work_minutes=self._settings.work_minutes,
            break_minutes=self._settings.break_minutes,
            selected_task_id=self._selected_task_id,
        )
