"""Public exports for completion alert components."""

from .chime import SoundDeviceChimeOutput, synthesize_chime
from .config import NotificationConfig, NotificationConfigurationError
from .desktop import DesktopNotifier
from .errors import NotificationError, NotificationUnavailableError
from .service import (
    PERMISSION_DEFAULT,
    PERMISSION_DENIED,
    PERMISSION_GRANTED,
    VIBRATION_PATTERN_MS,
    CompletionNotifier,
)

__all__ = [
    "CompletionNotifier",
    "DesktopNotifier",
    "NotificationConfig",
    "NotificationConfigurationError",
    "NotificationError",
    "NotificationUnavailableError",
    "PERMISSION_DEFAULT",
    "PERMISSION_DENIED",
    "PERMISSION_GRANTED",
    "SoundDeviceChimeOutput",
    "VIBRATION_PATTERN_MS",
    "synthesize_chime",
]
