class NotificationError(Exception):
    """Raised when a completion alert channel fails."""


class NotificationUnavailableError(NotificationError):
    """Raised when the platform offers no desktop notification backend."""
