"""Desktop notifications through plyer's platform backends."""

from __future__ import annotations

import logging
from typing import Any, Optional

from plyer import notification

from .errors import NotificationError, NotificationUnavailableError


class DesktopNotifier:
    """Thin wrapper over `plyer.notification` with typed failures."""
    def __init__(
        self,
        *,
        app_name: str,
        timeout_seconds: int = 5,
        backend: Any = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._app_name = app_name
        self._timeout_seconds = timeout_seconds
        self._backend = backend if backend is not None else notification
        self._logger = logger or logging.getLogger(__name__)

    def show(self, title: str, body: str) -> None:
        try:
            self._backend.notify(
                title=title,
                message=body,
                app_name=self._app_name,
                timeout=self._timeout_seconds,
            )
        except NotImplementedError as error:
            raise NotificationUnavailableError(
                "No desktop notification backend for this platform"
            ) from error
        except Exception as error:
            raise NotificationError(f"Desktop notification failed: {error}") from error
        self._logger.debug("Desktop notification shown: %s", title)
