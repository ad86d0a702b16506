"""Configuration model for completion alerts."""

from dataclasses import dataclass
from typing import Optional


class NotificationConfigurationError(Exception):
    """Raised when notification configuration is invalid."""


@dataclass(frozen=True)
class NotificationConfig:
    """Resolved alert channels for phase completion."""
    desktop_enabled: bool = True
    sound_enabled: bool = True
    celebrate_enabled: bool = True
    app_name: str = "Study Tracker"
    sample_rate_hz: int = 22050
    output_device_index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.sample_rate_hz <= 0:
            raise NotificationConfigurationError(
                f"sample_rate_hz must be positive, got: {self.sample_rate_hz}"
            )
        if not self.app_name.strip():
            raise NotificationConfigurationError("app_name cannot be empty")

    @classmethod
    def from_settings(cls, settings) -> "NotificationConfig":
        return cls(
            desktop_enabled=bool(settings.desktop_enabled),
            sound_enabled=bool(settings.sound_enabled),
            celebrate_enabled=bool(getattr(settings, "celebrate_enabled", True)),
            app_name=(getattr(settings, "app_name", "") or "Study Tracker").strip(),
            sample_rate_hz=int(getattr(settings, "sample_rate_hz", 22050)),
            output_device_index=settings.output_device,
        )
