"""Collaborator protocols injected into the timer engine."""

from __future__ import annotations

from typing import Protocol


class NotificationSinkLike(Protocol):
    """Best-effort completion alert; implementations must not raise."""
    def notify(self, title: str, body: str) -> None:
        ...
