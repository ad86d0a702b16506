import logging
import signal
import threading
from pathlib import Path
from typing import Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    load_app_config,
    load_user_config,
    resolve_config_path,
)
from app_config_parser import log_level
from notify import (
    CompletionNotifier,
    DesktopNotifier,
    NotificationConfig,
    NotificationConfigurationError,
    SoundDeviceChimeOutput,
)
from progress import PROGRESS_KEY, PreferenceProgressStore
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from runtime.ui import RuntimeUIPublisher
from server import ServerConfigurationError, UIServer, UIServerConfig
from storage import (
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferenceStore,
    namespaced_key,
)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("study_tracker")


def setup_signal_handlers(stop_event: threading.Event) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logging.getLogger("study_tracker").info("%s received, stopping...", signal_name)
        stop_event.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_preference_store(app_config: AppConfig) -> PreferenceStore:
    storage = app_config.storage
    if storage.in_memory:
        return InMemoryPreferenceStore()
    return JsonFilePreferenceStore(
        Path(storage.data_dir) / storage.preferences_file,
        logger=logging.getLogger("storage"),
    )


def build_notifier(
    app_config: AppConfig,
    ui_server: Optional[UIServer],
) -> CompletionNotifier:
    config = NotificationConfig.from_settings(app_config.notifications)
    ui = RuntimeUIPublisher(ui_server)
    return CompletionNotifier(
        config,
        desktop=DesktopNotifier(
            app_name=config.app_name,
            logger=logging.getLogger("notify.desktop"),
        ),
        chime_output=SoundDeviceChimeOutput(
            output_device_index=config.output_device_index,
            logger=logging.getLogger("notify.chime"),
        ),
        celebrate=ui.publish_celebrate,
        logger=logging.getLogger("notify"),
    )


def main(config_path: Optional[str] = None) -> int:
    """Run the study tracker timer runtime."""
    logger = setup_logging(level=logging.INFO)

    try:
        resolved_path = resolve_config_path(config_path)
        app_config = load_app_config(config_path)
        user_config = load_user_config()
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(log_level(app_config.logging))
    if app_config.source_file:
        logger.info("Loaded runtime config: %s", resolved_path)
    else:
        logger.info("No config file at %s; using defaults", resolved_path)

    ui_server: Optional[UIServer] = None
    if app_config.ui_server.enabled:
        try:
            ui_server = UIServer(
                config=UIServerConfig.from_settings(app_config.ui_server),
                logger=logging.getLogger("ui_server"),
            )
        except ServerConfigurationError as error:
            logger.error("UI server configuration error: %s", error)
            return 1

    try:
        notifier = build_notifier(app_config, ui_server)
    except NotificationConfigurationError as error:
        logger.error("Notification configuration error: %s", error)
        return 1

    preference_store = build_preference_store(app_config)
    runtime = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            user_config=user_config,
            preference_store=preference_store,
            notifier=notifier,
            progress_store=PreferenceProgressStore(
                preference_store,
                key=namespaced_key(PROGRESS_KEY, user_config.user_id),
                logger=logging.getLogger("progress"),
            ),
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )
    return runtime.run()


if __name__ == "__main__":
    raise SystemExit(main())
