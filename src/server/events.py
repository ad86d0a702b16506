"""Websocket message encoding, inbound command decoding, and sticky replay."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


class CommandDecodeError(ValueError):
    """Raised when a client message is not a well-formed command object."""


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


def decode_command(message: str | bytes) -> dict[str, Any]:
    """Parse `{"command": ..., ...}` sent by the UI into a plain dict."""
    if isinstance(message, bytes):
        try:
            message = message.decode("utf-8")
        except UnicodeDecodeError as error:
            raise CommandDecodeError("Command must be UTF-8 text") from error
    try:
        payload = json.loads(message)
    except ValueError as error:
        raise CommandDecodeError(f"Command is not valid JSON: {error}") from error
    if not isinstance(payload, dict):
        raise CommandDecodeError("Command must be a JSON object")
    name = payload.get("command")
    if not isinstance(name, str) or not name.strip():
        raise CommandDecodeError("Command object requires a 'command' string")
    payload["command"] = name.strip()
    return payload


class StickyEventStore:
    """Thread-safe cache of the latest state events, replayed to new clients."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
