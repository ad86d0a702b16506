"""Dispatcher that executes UI commands against timer, task, widget, and progress state."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from contracts.command_contract import (
    COMMAND_ADD_PROGRESS,
    COMMAND_ADD_TASK,
    COMMAND_DELETE_PROGRESS,
    COMMAND_DRAG_END,
    COMMAND_DRAG_MOVE,
    COMMAND_DRAG_START,
    COMMAND_NAMES,
    COMMAND_PAUSE,
    COMMAND_REMOVE_TASK,
    COMMAND_REQUIRED_ARGUMENTS,
    COMMAND_RESET,
    COMMAND_RESIZE_VIEWPORT,
    COMMAND_SELECT_TASK,
    COMMAND_START,
    COMMAND_TOGGLE_LOCK,
    COMMAND_TOGGLE_TASK,
    COMMAND_TOGGLE_VISIBLE,
    COMMAND_UPDATE_SETTINGS,
    PROGRESS_COMMAND_NAMES,
    TASK_COMMAND_NAMES,
    TIMER_COMMAND_NAMES,
    WIDGET_COMMAND_NAMES,
)
from contracts.ui_protocol import EVENT_ERROR
from pomodoro import PomodoroActionResult, PomodoroEngine, TaskBook
from progress import ProgressStoreLike
from widget import FloatingWidgetController, WidgetState

from .messages import pomodoro_rejection_text, pomodoro_status_message, runtime_state
from .ui import RuntimeUIPublisher


class CommandArgumentError(ValueError):
    """Raised when a UI command carries missing or malformed arguments."""


class RuntimeCommandDispatcher:
    """Routes UI commands to the engine, task book, widget, and progress store."""
    def __init__(
        self,
        *,
        logger: logging.Logger,
        engine: PomodoroEngine,
        tasks: TaskBook,
        widget: FloatingWidgetController,
        ui: RuntimeUIPublisher,
        progress_store: Optional[ProgressStoreLike] = None,
        user_id: Optional[str] = None,
    ):
        self._logger = logger
        self._engine = engine
        self._tasks = tasks
        self._widget = widget
        self._ui = ui
        self._progress_store = progress_store
        self._user_id = user_id

    def handle_command(self, command: dict[str, Any]) -> None:
        name = command.get("command")
        if not isinstance(name, str) or name not in COMMAND_NAMES:
            self._logger.warning("Unsupported command: %r", name)
            self._publish_error(str(name), "Unsupported command")
            return

        try:
            _require_arguments(name, command)
            if name in TIMER_COMMAND_NAMES:
                self._handle_timer_command(name, command)
            elif name in TASK_COMMAND_NAMES:
                self._handle_task_command(name, command)
            elif name in WIDGET_COMMAND_NAMES:
                self._handle_widget_command(name, command)
            elif name in PROGRESS_COMMAND_NAMES:
                self._handle_progress_command(name, command)
        except ValueError as error:
            self._logger.warning("Rejected command %s: %s", name, error)
            self._publish_error(name, str(error))

    def _handle_timer_command(self, name: str, arguments: dict[str, Any]) -> None:
        if name == COMMAND_START:
            result = self._engine.start()
        elif name == COMMAND_PAUSE:
            result = self._engine.pause()
        elif name == COMMAND_RESET:
            result = self._engine.reset()
        elif name == COMMAND_SELECT_TASK:
            task_id = arguments.get("task_id")
            if task_id is not None and not isinstance(task_id, str):
                raise CommandArgumentError("task_id must be a string or null")
            result = self._engine.select_task(task_id or None)
        elif name == COMMAND_UPDATE_SETTINGS:
            result = self._engine.update_settings(
                work_minutes=arguments.get("work_minutes"),
                break_minutes=arguments.get("break_minutes"),
            )
        else:  # pragma: no cover - guarded by TIMER_COMMAND_NAMES
            return
        self._publish_timer_result(result)

    def _handle_task_command(self, name: str, arguments: dict[str, Any]) -> None:
        if name == COMMAND_ADD_TASK:
            title = arguments.get("title")
            if not isinstance(title, str):
                raise CommandArgumentError("title must be a string")
            if self._tasks.add(title) is None:
                return
        else:
            task_id = _as_str(arguments.get("task_id"), "task_id")
            if name == COMMAND_TOGGLE_TASK:
                changed = self._tasks.toggle(task_id)
            elif name == COMMAND_REMOVE_TASK:
                # Deselect first so a completing phase never attributes a deleted task.
                cleared = self._engine.drop_task_selection(task_id)
                changed = self._tasks.remove(task_id)
                if cleared is not None:
                    self._publish_timer_result(cleared)
            else:  # pragma: no cover - guarded by TASK_COMMAND_NAMES
                return
            if changed is None:
                raise CommandArgumentError(f"Unknown task: {task_id}")
        self._ui.publish_tasks(self._tasks.tasks())

    def _handle_widget_command(self, name: str, arguments: dict[str, Any]) -> None:
        state: WidgetState
        if name == COMMAND_DRAG_START:
            state = self._widget.drag_start(
                _as_coordinate(arguments.get("x"), "x"),
                _as_coordinate(arguments.get("y"), "y"),
            )
        elif name == COMMAND_DRAG_MOVE:
            state = self._widget.drag_move(
                _as_coordinate(arguments.get("x"), "x"),
                _as_coordinate(arguments.get("y"), "y"),
            )
        elif name == COMMAND_DRAG_END:
            state = self._widget.drag_end()
        elif name == COMMAND_TOGGLE_LOCK:
            state = self._widget.toggle_lock()
        elif name == COMMAND_TOGGLE_VISIBLE:
            state = self._widget.toggle_visible()
        elif name == COMMAND_RESIZE_VIEWPORT:
            state = self._widget.resize_viewport(
                _as_coordinate(arguments.get("width"), "width"),
                _as_coordinate(arguments.get("height"), "height"),
            )
        else:  # pragma: no cover - guarded by WIDGET_COMMAND_NAMES
            return
        self._ui.publish_widget(state)

    def _handle_progress_command(self, name: str, arguments: dict[str, Any]) -> None:
        if self._progress_store is None:
            raise CommandArgumentError("Progress tracking is not configured")
        if not self._user_id:
            raise CommandArgumentError("No signed-in user for progress entries")

        # The store pushes fresh snapshots to subscribers after each write.
        if name == COMMAND_ADD_PROGRESS:
            self._progress_store.add(
                self._user_id,
                subject=_as_str(arguments.get("subject"), "subject"),
                topic=_as_optional_str(arguments.get("topic"), "topic"),
                percentage=arguments.get("percentage", 0),
                notes=_as_optional_str(arguments.get("notes"), "notes"),
                understanding=arguments.get("understanding", 3),
            )
        elif name == COMMAND_DELETE_PROGRESS:
            record_id = _as_str(arguments.get("record_id"), "record_id")
            if not self._progress_store.delete(record_id):
                raise CommandArgumentError(f"Unknown progress entry: {record_id}")

    def _publish_timer_result(self, result: PomodoroActionResult) -> None:
        message = (
            pomodoro_status_message(result.snapshot)
            if result.accepted
            else pomodoro_rejection_text(result.action, result.reason)
        )
        self._ui.publish_pomodoro_update(
            result.snapshot,
            action=result.action,
            accepted=result.accepted,
            reason=result.reason,
            message=message,
        )
        if result.accepted:
            self._ui.publish_state(runtime_state(result.snapshot), message=message)

    def _publish_error(self, command: str, message: str) -> None:
        self._ui.publish(EVENT_ERROR, command=command, message=message)


def _require_arguments(name: str, arguments: dict[str, Any]) -> None:
    missing = [key for key in COMMAND_REQUIRED_ARGUMENTS.get(name, ()) if key not in arguments]
    if missing:
        raise CommandArgumentError(f"Missing argument(s): {', '.join(missing)}")


def _as_str(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CommandArgumentError(f"{field} must be a non-empty string")
    return value.strip()


def _as_optional_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise CommandArgumentError(f"{field} must be a string")
    return value


def _as_coordinate(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CommandArgumentError(f"{field} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise CommandArgumentError(f"{field} must be finite")
    return int(round(value))
