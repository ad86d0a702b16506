"""Runtime orchestration for the timer engine, UI commands, and progress feed."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from app_config import AppConfig, UserConfig
from pomodoro import (
    IntervalScheduler,
    PomodoroEngine,
    SessionLog,
    TaskBook,
    ThreadedIntervalScheduler,
    TimerSettings,
    TimerSettingsStore,
)
from pomodoro.constants import (
    ACTION_SYNC,
    REASON_STARTUP,
    SESSIONS_KEY,
    SETTINGS_KEY,
    TASKS_KEY,
)
from progress import ProgressRecord, ProgressStoreLike, Subscription
from storage import PreferenceStore, namespaced_key
from widget import FloatingWidgetController
from contracts.ui_protocol import EVENT_ERROR, STATE_ERROR

from .command_dispatch import RuntimeCommandDispatcher
from .contracts import NotifierLike, UIServerLifecycleLike
from .messages import pomodoro_status_message, runtime_state
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher

_POLL_INTERVAL_SECONDS = 0.25


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[[threading.Event], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    user_config: UserConfig
    preference_store: PreferenceStore
    notifier: Optional[NotifierLike]
    progress_store: Optional[ProgressStoreLike]
    ui_server: Optional[UIServerLifecycleLike]
    hooks: RuntimeHooks
    scheduler: Optional[IntervalScheduler] = None


class RuntimeEngine:
    """Wires the timer engine to storage, notifications, and the UI server."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._stop_event = threading.Event()
        self._progress_subscription: Optional[Subscription] = None

        config = bootstrap.app_config
        user_id = bootstrap.user_config.user_id
        store = bootstrap.preference_store

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._owned_scheduler: Optional[ThreadedIntervalScheduler] = None
        scheduler = bootstrap.scheduler
        if scheduler is None:
            scheduler = self._owned_scheduler = ThreadedIntervalScheduler(
                logger=logging.getLogger("pomodoro.scheduler"),
            )
        self._tasks = TaskBook(
            store,
            key=namespaced_key(TASKS_KEY, user_id),
            logger=logging.getLogger("pomodoro.tasks"),
        )
        self._sessions = SessionLog(
            store,
            key=namespaced_key(SESSIONS_KEY, user_id),
            logger=logging.getLogger("pomodoro.sessions"),
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                logger=self._logger,
                ui=self._ui,
                sessions=self._sessions,
                tasks=self._tasks,
            )
        )
        self._engine = PomodoroEngine(
            sessions=self._sessions,
            tasks=self._tasks,
            settings=TimerSettings(
                work_minutes=config.timer.work_minutes,
                break_minutes=config.timer.break_minutes,
            ),
            settings_store=TimerSettingsStore(
                store,
                key=namespaced_key(SETTINGS_KEY, user_id),
                logger=logging.getLogger("pomodoro.settings"),
            ),
            notifier=bootstrap.notifier,
            scheduler=scheduler,
            on_tick=self._tick_processor.handle_tick,
            tick_interval_seconds=config.timer.tick_interval_seconds,
            logger=logging.getLogger("pomodoro"),
        )
        self._widget = FloatingWidgetController(
            viewport=(config.widget.viewport_width, config.widget.viewport_height),
            widget_size=(config.widget.widget_width, config.widget.widget_height),
            position=(config.widget.initial_x, config.widget.initial_y),
            logger=logging.getLogger("widget"),
        )
        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            engine=self._engine,
            tasks=self._tasks,
            widget=self._widget,
            ui=self._ui,
            progress_store=bootstrap.progress_store,
            user_id=user_id,
        )

    @property
    def engine(self) -> PomodoroEngine:
        return self._engine

    @property
    def dispatcher(self) -> RuntimeCommandDispatcher:
        return self._dispatcher

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> int:
        try:
            self._bootstrap.hooks.setup_signal_handlers(self._stop_event)
            self._request_notification_permission()
            self._publish_startup_sync()
            self._subscribe_progress()

            ui_server = self._bootstrap.ui_server
            if ui_server is not None:
                ui_server.set_command_handler(self._dispatcher.handle_command)
                self._logger.info("Starting UI server...")
                ui_server.start()

            self._logger.info("Ready! Study tracker is running.")
            while not self._stop_event.wait(_POLL_INTERVAL_SECONDS):
                if ui_server is not None and not ui_server.is_running:
                    self._logger.error("UI server stopped unexpectedly")
                    return 1
            self._logger.info("Shutdown requested.")
            return 0
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            self._ui.publish(EVENT_ERROR, state=STATE_ERROR, message=str(error))
            return 1
        finally:
            self._shutdown()

    def _request_notification_permission(self) -> None:
        notifier = self._bootstrap.notifier
        if notifier is None:
            return
        permission = notifier.request_permission()
        self._logger.info("Notification permission: %s", permission)

    def _publish_startup_sync(self) -> None:
        snapshot = self._engine.snapshot()
        self._ui.publish_pomodoro_update(
            snapshot,
            action=ACTION_SYNC,
            accepted=True,
            reason=REASON_STARTUP,
        )
        self._ui.publish_tasks(self._tasks.tasks())
        self._ui.publish_sessions(
            self._sessions.sessions(),
            today_focus_seconds=self._sessions.today_focus_seconds(),
        )
        self._ui.publish_widget(self._widget.state())
        self._ui.publish_state(
            runtime_state(snapshot),
            message=pomodoro_status_message(snapshot),
        )

    def _subscribe_progress(self) -> None:
        progress_store = self._bootstrap.progress_store
        user_id = self._bootstrap.user_config.user_id
        if progress_store is None:
            return
        if not user_id:
            self._logger.info("No user id configured; progress feed disabled.")
            return
        self._progress_subscription = progress_store.subscribe(
            user_id,
            self._publish_progress,
        )

    def _publish_progress(self, records: list[ProgressRecord]) -> None:
        self._ui.publish_progress(records)

    def _shutdown(self) -> None:
        self._logger.info("Stopping timer...")
        self._engine.close()
        if self._owned_scheduler is not None:
            self._owned_scheduler.close()

        if self._progress_subscription is not None:
            self._progress_subscription.cancel()
            self._progress_subscription = None

        notifier = self._bootstrap.notifier
        if notifier is not None:
            try:
                notifier.close()
            except Exception as error:
                self._logger.error("Error closing notifier: %s", error, exc_info=True)

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
