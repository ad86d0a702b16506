"""Web UI websocket event and state constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_STATE_UPDATE = "state_update"
EVENT_POMODORO = "pomodoro"
EVENT_TASKS = "tasks"
EVENT_SESSIONS = "sessions"
EVENT_WIDGET = "widget"
EVENT_PROGRESS = "progress"
EVENT_CELEBRATE = "celebrate"
EVENT_ERROR = "error"

# UI runtime states
STATE_IDLE = "idle"
STATE_FOCUSING = "focusing"
STATE_RESTING = "resting"
STATE_ERROR = "error"

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_STATE_UPDATE,
        EVENT_POMODORO,
        EVENT_TASKS,
        EVENT_SESSIONS,
        EVENT_WIDGET,
        EVENT_PROGRESS,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_POMODORO,
    EVENT_TASKS,
    EVENT_SESSIONS,
    EVENT_WIDGET,
    EVENT_PROGRESS,
    EVENT_STATE_UPDATE,
)
