"""Local preference storage for timer settings, sessions, and tasks."""

from .preferences import (
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferenceStore,
    StorageError,
    load_json_list,
    load_json_object,
    namespaced_key,
    save_json,
)

__all__ = [
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "PreferenceStore",
    "StorageError",
    "load_json_list",
    "load_json_object",
    "namespaced_key",
    "save_json",
]
