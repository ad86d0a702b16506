"""Append-only log of completed work and break phases."""

from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Callable, Optional

from storage import PreferenceStore, load_json_list, save_json

from .constants import PHASE_WORK, SESSIONS_KEY
from .records import Session, SessionType, TimeIdFactory


def _local_today() -> str:
    return dt.date.today().isoformat()


class SessionLog:
    """Session history mirrored into the preference store on every append."""

    def __init__(
        self,
        store: PreferenceStore,
        *,
        key: str = SESSIONS_KEY,
        id_factory: Optional[Callable[[], str]] = None,
        today_fn: Callable[[], str] = _local_today,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._key = key
        self._id_factory = id_factory or TimeIdFactory()
        self._today_fn = today_fn
        self._logger = logger or logging.getLogger("pomodoro.sessions")
        self._lock = threading.Lock()
        self._sessions: list[Session] = self._load()

    def sessions(self) -> list[Session]:
        with self._lock:
            return list(self._sessions)

    def record(
        self,
        session_type: SessionType,
        duration_seconds: int,
        task_id: Optional[str] = None,
    ) -> Session:
        session = Session(
            id=self._id_factory(),
            date=self._today_fn(),
            type=session_type,
            duration_seconds=int(duration_seconds),
            task_id=task_id,
        )
        with self._lock:
            self._sessions.append(session)
            save_json(
                self._store,
                self._key,
                [item.to_dict() for item in self._sessions],
                logger=self._logger,
            )
        self._logger.info(
            "Session recorded: type=%s duration=%ss task=%s",
            session.type,
            session.duration_seconds,
            session.task_id,
        )
        return session

    def today_focus_seconds(self) -> int:
        """Total work seconds recorded for the current day."""
        today = self._today_fn()
        with self._lock:
            return sum(
                session.duration_seconds
                for session in self._sessions
                if session.date == today and session.type == PHASE_WORK
            )

    def _load(self) -> list[Session]:
        sessions: list[Session] = []
        for raw in load_json_list(self._store, self._key, logger=self._logger):
            session = Session.from_dict(raw) if isinstance(raw, dict) else None
            if session is None:
                self._logger.warning("Skipping malformed session entry: %r", raw)
                continue
            sessions.append(session)
        return sessions
