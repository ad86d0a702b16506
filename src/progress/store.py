"""Progress store with explicit subscribe/cancel snapshot delivery."""

from __future__ import annotations

import datetime as dt
import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Protocol

from storage import PreferenceStore, load_json_list, save_json

from .models import ProgressRecord, clamp_percentage, clamp_understanding

PROGRESS_KEY = "progress_records"

SnapshotCallback = Callable[[list[ProgressRecord]], None]


class Subscription(Protocol):
    def cancel(self) -> None:
        ...


class ProgressStoreLike(Protocol):
    def add(
        self,
        uid: str,
        *,
        subject: str,
        topic: str = "",
        percentage: Any = 0,
        notes: str = "",
        understanding: Any = 3,
    ) -> str:
        ...

    def delete(self, record_id: str) -> bool:
        ...

    def subscribe(self, uid: str, callback: SnapshotCallback) -> Subscription:
        ...


@dataclass
class _Listener:
    uid: str
    callback: SnapshotCallback
    active: bool = True


@dataclass
class _InMemorySubscription:
    store: "InMemoryProgressStore"
    listener: _Listener = field(repr=False)

    def cancel(self) -> None:
        self.store._remove_listener(self.listener)


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _by_seq(record: ProgressRecord) -> int:
    return record.seq


class InMemoryProgressStore:
    """Thread-safe progress store delivering full per-user snapshots.

    Every subscriber receives the user's records ordered newest first, once
    on subscribe and again after each mutation. Deliveries are serialized so
    the last snapshot a subscriber sees always reflects the latest write.
    """

    def __init__(
        self,
        *,
        now_fn: Callable[[], dt.datetime] = _utc_now,
        logger: Optional[logging.Logger] = None,
        records: Iterable[ProgressRecord] = (),
    ):
        self._now_fn = now_fn
        self._logger = logger or logging.getLogger("progress")
        self._records: dict[str, ProgressRecord] = {record.id: record for record in records}
        self._listeners: list[_Listener] = []
        last_seq = max((record.seq for record in self._records.values()), default=0)
        self._seq = itertools.count(last_seq + 1)
        self._lock = threading.RLock()

    def add(
        self,
        uid: str,
        *,
        subject: str,
        topic: str = "",
        percentage: Any = 0,
        notes: str = "",
        understanding: Any = 3,
    ) -> str:
        subject = (subject or "").strip()
        if not uid:
            raise ValueError("uid is required")
        if not subject:
            raise ValueError("subject is required")

        with self._lock:
            seq = next(self._seq)
            while f"progress-{seq}" in self._records:
                seq = next(self._seq)
            record = ProgressRecord(
                id=f"progress-{seq}",
                uid=uid,
                subject=subject,
                topic=(topic or "").strip(),
                percentage=clamp_percentage(percentage),
                notes=(notes or "").strip(),
                understanding=clamp_understanding(understanding),
                created_at=self._now_fn(),
                seq=seq,
            )
            self._records[record.id] = record
            self._persist_locked()
            self._logger.info("Progress added: id=%s subject=%s", record.id, subject)
            self._deliver_locked(uid)
        return record.id

    def delete(self, record_id: str) -> bool:
        with self._lock:
            record = self._records.pop(record_id, None)
            if record is None:
                return False
            self._persist_locked()
            self._logger.info("Progress deleted: id=%s", record_id)
            self._deliver_locked(record.uid)
        return True

    def records(self, uid: str) -> list[ProgressRecord]:
        with self._lock:
            return self._records_for_locked(uid)

    def subscribe(self, uid: str, callback: SnapshotCallback) -> Subscription:
        listener = _Listener(uid=uid, callback=callback)
        with self._lock:
            self._listeners.append(listener)
            self._notify_locked(listener, self._records_for_locked(uid))
        return _InMemorySubscription(self, listener)

    def _persist_locked(self) -> None:
        """Hook for durable stores; called after every mutation."""

    def _remove_listener(self, listener: _Listener) -> None:
        with self._lock:
            listener.active = False
            self._listeners = [item for item in self._listeners if item is not listener]

    def _records_for_locked(self, uid: str) -> list[ProgressRecord]:
        return sorted(
            (record for record in self._records.values() if record.uid == uid),
            key=lambda record: (record.created_at, record.seq),
            reverse=True,
        )

    def _deliver_locked(self, uid: str) -> None:
        snapshot = self._records_for_locked(uid)
        for listener in list(self._listeners):
            if listener.uid == uid:
                self._notify_locked(listener, list(snapshot))

    def _notify_locked(self, listener: _Listener, snapshot: list[ProgressRecord]) -> None:
        if not listener.active:
            return
        try:
            listener.callback(snapshot)
        except Exception as error:
            self._logger.error("Progress subscriber failed: %s", error, exc_info=True)


class PreferenceProgressStore(InMemoryProgressStore):
    """Progress store mirrored into a preference store as a JSON list."""

    def __init__(
        self,
        store: PreferenceStore,
        *,
        key: str = PROGRESS_KEY,
        now_fn: Callable[[], dt.datetime] = _utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        logger = logger or logging.getLogger("progress")
        self._store = store
        self._key = key
        super().__init__(now_fn=now_fn, logger=logger, records=self._load(logger))

    def _load(self, logger: logging.Logger) -> list[ProgressRecord]:
        records: list[ProgressRecord] = []
        for item in load_json_list(self._store, self._key, logger=logger):
            record = ProgressRecord.from_dict(item) if isinstance(item, dict) else None
            if record is None:
                logger.warning("Skipping malformed progress entry under %s", self._key)
                continue
            records.append(record)
        return records

    def _persist_locked(self) -> None:
        save_json(
            self._store,
            self._key,
            [record.to_dict() for record in sorted(self._records.values(), key=_by_seq)],
            logger=self._logger,
        )
