"""Canonical command names sent by the web UI and their argument shapes."""

from __future__ import annotations

from pomodoro.constants import (
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_SELECT_TASK,
    ACTION_START,
    ACTION_UPDATE_SETTINGS,
)

COMMAND_START = ACTION_START
COMMAND_PAUSE = ACTION_PAUSE
COMMAND_RESET = ACTION_RESET
COMMAND_SELECT_TASK = ACTION_SELECT_TASK
COMMAND_UPDATE_SETTINGS = ACTION_UPDATE_SETTINGS

COMMAND_ADD_TASK = "add_task"
COMMAND_TOGGLE_TASK = "toggle_task"
COMMAND_REMOVE_TASK = "remove_task"

COMMAND_DRAG_START = "drag_start"
COMMAND_DRAG_MOVE = "drag_move"
COMMAND_DRAG_END = "drag_end"
COMMAND_TOGGLE_LOCK = "toggle_lock"
COMMAND_TOGGLE_VISIBLE = "toggle_visible"
COMMAND_RESIZE_VIEWPORT = "resize_viewport"

COMMAND_ADD_PROGRESS = "add_progress"
COMMAND_DELETE_PROGRESS = "delete_progress"

COMMAND_NAME_ORDER: tuple[str, ...] = (
    COMMAND_START,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_SELECT_TASK,
    COMMAND_UPDATE_SETTINGS,
    COMMAND_ADD_TASK,
    COMMAND_TOGGLE_TASK,
    COMMAND_REMOVE_TASK,
    COMMAND_DRAG_START,
    COMMAND_DRAG_MOVE,
    COMMAND_DRAG_END,
    COMMAND_TOGGLE_LOCK,
    COMMAND_TOGGLE_VISIBLE,
    COMMAND_RESIZE_VIEWPORT,
    COMMAND_ADD_PROGRESS,
    COMMAND_DELETE_PROGRESS,
)

COMMAND_NAMES: frozenset[str] = frozenset(COMMAND_NAME_ORDER)

TIMER_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_PAUSE,
        COMMAND_RESET,
        COMMAND_SELECT_TASK,
        COMMAND_UPDATE_SETTINGS,
    }
)

TASK_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_ADD_TASK,
        COMMAND_TOGGLE_TASK,
        COMMAND_REMOVE_TASK,
    }
)

WIDGET_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_DRAG_START,
        COMMAND_DRAG_MOVE,
        COMMAND_DRAG_END,
        COMMAND_TOGGLE_LOCK,
        COMMAND_TOGGLE_VISIBLE,
        COMMAND_RESIZE_VIEWPORT,
    }
)

PROGRESS_COMMAND_NAMES: frozenset[str] = frozenset(
    {
        COMMAND_ADD_PROGRESS,
        COMMAND_DELETE_PROGRESS,
    }
)

# Commands that carry no arguments; anything sent alongside is ignored.
COMMANDS_WITHOUT_ARGUMENTS: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_PAUSE,
        COMMAND_RESET,
        COMMAND_DRAG_END,
        COMMAND_TOGGLE_LOCK,
        COMMAND_TOGGLE_VISIBLE,
    }
)

# Required argument names per command.
COMMAND_REQUIRED_ARGUMENTS: dict[str, tuple[str, ...]] = {
    COMMAND_SELECT_TASK: ("task_id",),
    COMMAND_ADD_TASK: ("title",),
    COMMAND_TOGGLE_TASK: ("task_id",),
    COMMAND_REMOVE_TASK: ("task_id",),
    COMMAND_DRAG_START: ("x", "y"),
    COMMAND_DRAG_MOVE: ("x", "y"),
    COMMAND_RESIZE_VIEWPORT: ("width", "height"),
    COMMAND_ADD_PROGRESS: ("subject",),
    COMMAND_DELETE_PROGRESS: ("record_id",),
}
