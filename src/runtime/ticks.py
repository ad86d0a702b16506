"""Tick handlers that publish countdown and phase-completion updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pomodoro import PomodoroTick, SessionLog, TaskBook
from pomodoro.constants import (
    ACTION_COMPLETED,
    ACTION_TICK,
    REASON_COMPLETED,
    REASON_TICK,
)

from .messages import focus_summary, pomodoro_status_message, runtime_state
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for processing timer tick events."""
    logger: logging.Logger
    ui: RuntimeUIPublisher
    sessions: SessionLog
    tasks: TaskBook


class TickProcessor:
    """Publishes every tick; completions also refresh sessions and tasks."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def handle_tick(self, tick: PomodoroTick) -> None:
        deps = self._dependencies
        if not tick.completed:
            deps.ui.publish_pomodoro_update(
                tick.snapshot,
                action=ACTION_TICK,
                reason=REASON_TICK,
            )
            return

        today_focus_seconds = deps.sessions.today_focus_seconds()
        deps.ui.publish_pomodoro_update(
            tick.snapshot,
            action=ACTION_COMPLETED,
            accepted=True,
            reason=REASON_COMPLETED,
            message=focus_summary(today_focus_seconds),
        )
        deps.ui.publish_sessions(
            deps.sessions.sessions(),
            today_focus_seconds=today_focus_seconds,
        )
        if tick.task is not None:
            deps.ui.publish_tasks(deps.tasks.tasks())
        deps.ui.publish_state(
            runtime_state(tick.snapshot),
            message=pomodoro_status_message(tick.snapshot),
        )
        deps.logger.debug(
            "Published completion of %s phase (focus today: %ss)",
            tick.completed_phase,
            today_focus_seconds,
        )
