"""Remote progress store interface with in-memory and preference-backed implementations."""

from .models import ProgressRecord, clamp_percentage, clamp_understanding
from .store import (
    PROGRESS_KEY,
    InMemoryProgressStore,
    PreferenceProgressStore,
    ProgressStoreLike,
    SnapshotCallback,
    Subscription,
)

__all__ = [
    "PROGRESS_KEY",
    "InMemoryProgressStore",
    "PreferenceProgressStore",
    "ProgressRecord",
    "ProgressStoreLike",
    "SnapshotCallback",
    "Subscription",
    "clamp_percentage",
    "clamp_understanding",
]
