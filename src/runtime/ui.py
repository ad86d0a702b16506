from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol

from contracts.ui_protocol import (
    EVENT_CELEBRATE,
    EVENT_POMODORO,
    EVENT_PROGRESS,
    EVENT_SESSIONS,
    EVENT_TASKS,
    EVENT_WIDGET,
)
from pomodoro import PomodoroSnapshot, Session, Task
from progress import ProgressRecord
from widget import WidgetState


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        ...


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        if self._ui_server:
            self._ui_server.publish_state(state, message=message, **payload)

    def publish_pomodoro_update(
        self,
        snapshot: PomodoroSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "phase": snapshot.phase,
            "running": snapshot.running,
            "duration_seconds": snapshot.duration_seconds,
            "remaining_seconds": snapshot.remaining_seconds,
            "work_minutes": snapshot.work_minutes,
            "break_minutes": snapshot.break_minutes,
            "selected_task_id": snapshot.selected_task_id,
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if message:
            payload["message"] = message
        self.publish(EVENT_POMODORO, **payload)

    def publish_tasks(self, tasks: Iterable[Task]) -> None:
        self.publish(EVENT_TASKS, tasks=[task.to_dict() for task in tasks])

    def publish_sessions(
        self,
        sessions: Iterable[Session],
        *,
        today_focus_seconds: int,
    ) -> None:
        self.publish(
            EVENT_SESSIONS,
            sessions=[session.to_dict() for session in sessions],
            today_focus_seconds=today_focus_seconds,
        )

    def publish_widget(self, state: WidgetState) -> None:
        self.publish(EVENT_WIDGET, **state.to_dict())

    def publish_progress(self, records: Iterable[ProgressRecord]) -> None:
        self.publish(EVENT_PROGRESS, records=[record.to_dict() for record in records])

    def publish_celebrate(
        self,
        title: str,
        body: str,
        vibration_pattern_ms: tuple[int, ...],
    ) -> None:
        self.publish(
            EVENT_CELEBRATE,
            title=title,
            body=body,
            vibrate=list(vibration_pattern_ms),
            confetti=True,
        )
