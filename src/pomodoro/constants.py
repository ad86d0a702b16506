"""Phase, action, reason, and storage-key constants used by the timer engine."""

from __future__ import annotations

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
WORK_MINUTES_RANGE: tuple[int, int] = (1, 60)
BREAK_MINUTES_RANGE: tuple[int, int] = (1, 30)
TICK_INTERVAL_SECONDS = 1.0

PHASE_WORK = "work"
PHASE_BREAK = "break"

NEXT_PHASE: dict[str, str] = {
    PHASE_WORK: PHASE_BREAK,
    PHASE_BREAK: PHASE_WORK,
}

# (title, body) shown when the given phase runs out.
COMPLETION_MESSAGES: dict[str, tuple[str, str]] = {
    PHASE_WORK: ("Pomodoro Complete!", "Time for a break!"),
    PHASE_BREAK: ("Break Over!", "Time to focus now."),
}

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_SELECT_TASK = "select_task"
ACTION_UPDATE_SETTINGS = "update_settings"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_ALREADY_RUNNING = "already_running"
REASON_NOT_RUNNING = "not_running"
REASON_TASK_SELECTED = "task_selected"
REASON_TASK_CLEARED = "task_cleared"
REASON_UNKNOWN_TASK = "unknown_task"
REASON_SETTINGS_UPDATED = "settings_updated"
REASON_CLOSED = "closed"

REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_STARTUP = "startup"

SESSIONS_KEY = "pomodoro_sessions"
TASKS_KEY = "pomodoro_tasks"
SETTINGS_KEY = "pomodoro_settings"
