"""Protocols describing runtime-facing notification and server capabilities."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol


class NotifierLike(Protocol):
    """Completion alert sink used by the runtime lifecycle."""
    def request_permission(self) -> str:
        ...

    def notify(self, title: str, body: str) -> None:
        ...

    def close(self) -> None:
        ...


class UIServerLifecycleLike(Protocol):
    """Server surface needed to wire commands and manage startup/shutdown."""
    @property
    def is_running(self) -> bool:
        ...

    def set_command_handler(
        self,
        handler: Optional[Callable[[dict[str, Any]], None]],
    ) -> None:
        ...

    def start(self, timeout_seconds: float = 5.0) -> None:
        ...

    def stop(self, timeout_seconds: float = 5.0) -> None:
        ...

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
