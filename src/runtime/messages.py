"""Status and rejection text builders for timer flows."""

from __future__ import annotations

from pomodoro import PomodoroSnapshot
from pomodoro.constants import (
    ACTION_PAUSE,
    ACTION_SELECT_TASK,
    ACTION_START,
    PHASE_BREAK,
    REASON_ALREADY_RUNNING,
    REASON_CLOSED,
    REASON_NOT_RUNNING,
    REASON_UNKNOWN_TASK,
)
from contracts.ui_protocol import STATE_FOCUSING, STATE_IDLE, STATE_RESTING


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def phase_label(phase: str) -> str:
    return "Break Time" if phase == PHASE_BREAK else "Focus Time"


def runtime_state(snapshot: PomodoroSnapshot) -> str:
    """Map a snapshot onto the coarse UI state."""
    if not snapshot.running:
        return STATE_IDLE
    return STATE_RESTING if snapshot.phase == PHASE_BREAK else STATE_FOCUSING


def pomodoro_status_message(snapshot: PomodoroSnapshot) -> str:
    remaining = format_duration(snapshot.remaining_seconds)
    if snapshot.running:
        return f"{phase_label(snapshot.phase)} ({remaining} remaining)"
    return f"{phase_label(snapshot.phase)} paused at {remaining}"


def focus_summary(today_focus_seconds: int) -> str:
    minutes = max(0, int(today_focus_seconds)) // 60
    return f"Focused {minutes} min today"


def pomodoro_rejection_text(action: str, reason: str) -> str:
    """Return text for a timer action the engine refused."""
    if reason == REASON_ALREADY_RUNNING and action == ACTION_START:
        return "The timer is already running."
    if reason == REASON_NOT_RUNNING and action == ACTION_PAUSE:
        return "The timer is not running."
    if reason == REASON_UNKNOWN_TASK and action == ACTION_SELECT_TASK:
        return "That task no longer exists."
    if reason == REASON_CLOSED:
        return "The timer has been shut down."
    return "That timer action is not possible right now."
