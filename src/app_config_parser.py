"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    StorageSettings,
    TimerDefaultsSettings,
    UIServerSettings,
    WidgetSettings,
)
from pomodoro.constants import BREAK_MINUTES_RANGE, WORK_MINUTES_RANGE

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    _forbid_secret_fields(raw, "root", ("user_id",))
    return AppConfig(
        timer=_parse_timer_settings(_section(raw, "timer")),
        storage=_parse_storage_settings(_section(raw, "storage"), base_dir=base_dir),
        notifications=_parse_notification_settings(_section(raw, "notifications")),
        widget=_parse_widget_settings(_section(raw, "widget")),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        logging=_parse_logging_settings(_section(raw, "logging")),
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerDefaultsSettings:
    work_minutes = _as_int(section.get("work_minutes", 25), "timer.work_minutes")
    break_minutes = _as_int(section.get("break_minutes", 5), "timer.break_minutes")
    _check_range(work_minutes, WORK_MINUTES_RANGE, "timer.work_minutes")
    _check_range(break_minutes, BREAK_MINUTES_RANGE, "timer.break_minutes")

    tick_interval = _as_float(
        section.get("tick_interval_seconds", 1.0),
        "timer.tick_interval_seconds",
    )
    if tick_interval <= 0 or not math.isfinite(tick_interval):
        raise AppConfigurationError("timer.tick_interval_seconds must be positive.")
    return TimerDefaultsSettings(
        work_minutes=work_minutes,
        break_minutes=break_minutes,
        tick_interval_seconds=tick_interval,
    )


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StorageSettings:
    data_dir = _as_str(section.get("data_dir", "data"), "storage.data_dir") or "data"
    preferences_file = (
        _as_str(section.get("preferences_file", "preferences.json"), "storage.preferences_file")
        or "preferences.json"
    )
    if Path(preferences_file).name != preferences_file:
        raise AppConfigurationError("storage.preferences_file must be a plain file name.")
    return StorageSettings(
        data_dir=_resolve_path(base_dir, data_dir),
        preferences_file=preferences_file,
        in_memory=_as_bool(section.get("in_memory", False), "storage.in_memory"),
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    return NotificationSettings(
        desktop_enabled=_as_bool(
            section.get("desktop_enabled", True),
            "notifications.desktop_enabled",
        ),
        sound_enabled=_as_bool(
            section.get("sound_enabled", True),
            "notifications.sound_enabled",
        ),
        celebrate_enabled=_as_bool(
            section.get("celebrate_enabled", True),
            "notifications.celebrate_enabled",
        ),
        app_name=(
            _as_str(section.get("app_name", "Study Tracker"), "notifications.app_name")
            or "Study Tracker"
        ),
        sample_rate_hz=_as_int(
            section.get("sample_rate_hz", 44100),
            "notifications.sample_rate_hz",
        ),
        output_device=(
            _as_int(section.get("output_device"), "notifications.output_device")
            if "output_device" in section
            else None
        ),
    )


def _parse_widget_settings(section: Mapping[str, Any]) -> WidgetSettings:
    settings = WidgetSettings(
        viewport_width=_as_int(section.get("viewport_width", 1280), "widget.viewport_width"),
        viewport_height=_as_int(section.get("viewport_height", 800), "widget.viewport_height"),
        widget_width=_as_int(section.get("widget_width", 200), "widget.widget_width"),
        widget_height=_as_int(section.get("widget_height", 200), "widget.widget_height"),
        initial_x=_as_int(section.get("initial_x", 20), "widget.initial_x"),
        initial_y=_as_int(section.get("initial_y", 80), "widget.initial_y"),
    )
    for name in ("viewport_width", "viewport_height", "widget_width", "widget_height"):
        if getattr(settings, name) <= 0:
            raise AppConfigurationError(f"widget.{name} must be positive.")
    return settings


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = (_as_str(section.get("level", "INFO"), "logging.level") or "INFO").upper()
    if level not in _LOG_LEVELS:
        allowed = ", ".join(_LOG_LEVELS)
        raise AppConfigurationError(f"logging.level must be one of: {allowed}.")
    return LoggingSettings(level=level)


def log_level(settings: LoggingSettings) -> int:
    return logging.getLevelName(settings.level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _check_range(value: int, bounds: tuple[int, int], field: str) -> None:
    lower, upper = bounds
    if not lower <= value <= upper:
        raise AppConfigurationError(f"{field} must be between {lower} and {upper}.")


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _forbid_secret_fields(
    section: Mapping[str, Any],
    section_name: str,
    fields: tuple[str, ...],
) -> None:
    present = [field for field in fields if field in section]
    if present:
        joined = ", ".join(f"{section_name}.{field}" for field in present)
        raise AppConfigurationError(
            f"Identity values must not be stored in config.toml: {joined}. "
            "Move them to environment variables."
        )
