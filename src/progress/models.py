"""Subject-progress entries logged by the user."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

PERCENTAGE_RANGE: tuple[int, int] = (0, 100)
UNDERSTANDING_RANGE: tuple[int, int] = (1, 5)
DEFAULT_UNDERSTANDING = 3


@dataclass(frozen=True)
class ProgressRecord:
    id: str
    uid: str
    subject: str
    topic: str
    percentage: float
    notes: str
    understanding: int
    created_at: dt.datetime
    # Insertion order; breaks ties between records sharing a timestamp.
    seq: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uid": self.uid,
            "subject": self.subject,
            "topic": self.topic,
            "percentage": self.percentage,
            "notes": self.notes,
            "understanding": self.understanding,
            "createdAt": self.created_at.isoformat(),
            "seq": self.seq,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional["ProgressRecord"]:
        """Build a record from stored JSON; returns None for malformed entries."""
        record_id = raw.get("id")
        uid = raw.get("uid")
        subject = raw.get("subject")
        created_at = raw.get("createdAt")
        seq = raw.get("seq", 0)
        if not isinstance(record_id, str) or not record_id:
            return None
        if not isinstance(uid, str) or not uid:
            return None
        if not isinstance(subject, str) or not subject.strip():
            return None
        if isinstance(seq, bool) or not isinstance(seq, int) or seq < 0:
            return None
        if not isinstance(created_at, str):
            return None
        try:
            created = dt.datetime.fromisoformat(created_at)
        except ValueError:
            return None
        if created.tzinfo is None:
            created = created.replace(tzinfo=dt.timezone.utc)
        topic = raw.get("topic")
        notes = raw.get("notes")
        return cls(
            id=record_id,
            uid=uid,
            subject=subject.strip(),
            topic=topic if isinstance(topic, str) else "",
            percentage=clamp_percentage(raw.get("percentage")),
            notes=notes if isinstance(notes, str) else "",
            understanding=clamp_understanding(raw.get("understanding")),
            created_at=created,
            seq=seq,
        )


def clamp_percentage(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return float(PERCENTAGE_RANGE[0])
    if math.isnan(number):
        return float(PERCENTAGE_RANGE[0])
    low, high = PERCENTAGE_RANGE
    return float(max(low, min(high, number)))


def clamp_understanding(value: Any) -> int:
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_UNDERSTANDING
    low, high = UNDERSTANDING_RANGE
    return max(low, min(high, number))
