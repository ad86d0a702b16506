"""Key-value preference stores backing timer settings, sessions, and tasks."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional, Protocol


class StorageError(Exception):
    """Raised when a preference store cannot be read or written."""


class PreferenceStore(Protocol):
    """String key-value storage scoped to one profile."""
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def namespaced_key(base: str, user_id: Optional[str]) -> str:
    """Suffix a preference key with the user id when one is configured."""
    if user_id:
        return f"{base}-{user_id}"
    return base


class InMemoryPreferenceStore:
    """Process-local store; contents vanish with the process."""
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value


class JsonFilePreferenceStore:
    """Preference store persisted as a single JSON object on disk.

    The file is read once on construction and rewritten atomically on every
    `set`. A missing or unreadable file starts the store empty.
    """

    def __init__(self, path: str | Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("storage")
        self._lock = threading.Lock()
        self._values = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
            self._write_locked()

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as error:
            self._logger.warning(
                "Ignoring unreadable preference file %s: %s",
                self._path,
                error,
            )
            return {}
        if not isinstance(raw, dict):
            self._logger.warning("Preference file %s is not a JSON object", self._path)
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def _write_locked(self) -> None:
        temp_name: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                dir=str(self._path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._values, fh, indent=2, sort_keys=True)
            os.replace(temp_name, self._path)
        except (OSError, TypeError, ValueError) as error:
            # Cleanup temp file on failure
            if temp_name is not None and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError as cleanup_error:
                    self._logger.debug("Could not remove %s: %s", temp_name, cleanup_error)
            raise StorageError(f"Failed to write preferences to {self._path}: {error}") from error


def load_json_list(
    store: PreferenceStore,
    key: str,
    *,
    logger: logging.Logger,
) -> list[Any]:
    """Return the JSON list stored under `key`, or an empty list."""
    try:
        raw = store.get(key)
    except Exception as error:
        logger.warning("Preference store unavailable for %s: %s", key, error)
        return []
    if not raw:
        return []
    try:
        decoded = json.loads(raw)
    except ValueError as error:
        logger.warning("Discarding malformed JSON under %s: %s", key, error)
        return []
    if not isinstance(decoded, list):
        logger.warning("Discarding non-list value under %s", key)
        return []
    return decoded


def load_json_object(
    store: PreferenceStore,
    key: str,
    *,
    logger: logging.Logger,
) -> dict[str, Any]:
    """Return the JSON object stored under `key`, or an empty dict."""
    try:
        raw = store.get(key)
    except Exception as error:
        logger.warning("Preference store unavailable for %s: %s", key, error)
        return {}
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except ValueError as error:
        logger.warning("Discarding malformed JSON under %s: %s", key, error)
        return {}
    if not isinstance(decoded, dict):
        logger.warning("Discarding non-object value under %s", key)
        return {}
    return decoded


def save_json(
    store: PreferenceStore,
    key: str,
    value: Any,
    *,
    logger: logging.Logger,
) -> bool:
    """Best-effort write of a JSON value; failures are logged, not raised."""
    try:
        store.set(key, json.dumps(value))
    except Exception as error:
        logger.error("Failed to persist %s: %s", key, error)
        return False
    return True
