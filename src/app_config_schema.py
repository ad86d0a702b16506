"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pomodoro.constants import DEFAULT_BREAK_MINUTES, DEFAULT_WORK_MINUTES, TICK_INTERVAL_SECONDS

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_DATA_DIR = "data"
DEFAULT_PREFERENCES_FILE = "preferences.json"
USER_ID_ENV = "STUDY_TRACKER_USER_ID"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerDefaultsSettings:
    """Initial timer lengths loaded from `[timer]`; stored preferences win."""
    work_minutes: int = DEFAULT_WORK_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    tick_interval_seconds: float = TICK_INTERVAL_SECONDS


@dataclass(frozen=True)
class StorageSettings:
    data_dir: str = DEFAULT_DATA_DIR
    preferences_file: str = DEFAULT_PREFERENCES_FILE
    in_memory: bool = False


@dataclass(frozen=True)
class NotificationSettings:
    """Completion alert channels loaded from `[notifications]`."""
    desktop_enabled: bool = True
    sound_enabled: bool = True
    celebrate_enabled: bool = True
    app_name: str = "Study Tracker"
    sample_rate_hz: int = 44100
    output_device: Optional[int] = None


@dataclass(frozen=True)
class WidgetSettings:
    viewport_width: int = 1280
    viewport_height: int = 800
    widget_width: int = 200
    widget_height: int = 200
    initial_x: int = 20
    initial_y: int = 80


@dataclass(frozen=True)
class UIServerSettings:
    """Websocket/static UI server values loaded from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Top-level immutable app configuration."""
    timer: TimerDefaultsSettings = field(default_factory=TimerDefaultsSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    widget: WidgetSettings = field(default_factory=WidgetSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source_file: str = ""


@dataclass(frozen=True)
class UserConfig:
    """Identity values loaded from environment variables."""
    user_id: Optional[str]
