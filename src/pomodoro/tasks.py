"""Persisted to-do list whose entries collect pomodoro attributions."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, Optional

from storage import PreferenceStore, load_json_list, save_json

from .constants import TASKS_KEY
from .records import Task, TimeIdFactory


class TaskBook:
    """Ordered task list mirrored into the preference store on every change."""

    def __init__(
        self,
        store: PreferenceStore,
        *,
        key: str = TASKS_KEY,
        id_factory: Optional[Callable[[], str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._key = key
        self._id_factory = id_factory or TimeIdFactory()
        self._logger = logger or logging.getLogger("pomodoro.tasks")
        self._lock = threading.Lock()
        self._tasks: list[Task] = self._load()

    def tasks(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return self._find_locked(task_id)

    def add(self, title: str) -> Optional[Task]:
        """Append a new task; blank titles are ignored."""
        cleaned = (title or "").strip()
        if not cleaned:
            return None

        with self._lock:
            existing = {task.id for task in self._tasks}
            task_id = self._id_factory()
            while task_id in existing:
                task_id = self._id_factory()
            task = Task(id=task_id, title=cleaned)
            self._tasks.append(task)
            self._persist_locked()
        self._logger.info("Task added: id=%s title=%s", task.id, task.title)
        return task

    def toggle(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return self._replace_locked(
                task_id,
                lambda task: replace(task, completed=not task.completed),
            )

    def increment_pomodoro(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._replace_locked(
                task_id,
                lambda task: replace(task, pomodoro_count=task.pomodoro_count + 1),
            )
        if task is None:
            self._logger.warning("Cannot attribute pomodoro to missing task %s", task_id)
        return task

    def remove(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._find_locked(task_id)
            if task is None:
                return None
            self._tasks = [item for item in self._tasks if item.id != task_id]
            self._persist_locked()
        self._logger.info("Task removed: id=%s", task_id)
        return task

    def _find_locked(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _replace_locked(
        self,
        task_id: str,
        change: Callable[[Task], Task],
    ) -> Optional[Task]:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                updated = change(task)
                self._tasks[index] = updated
                self._persist_locked()
                return updated
        return None

    def _persist_locked(self) -> None:
        save_json(
            self._store,
            self._key,
            [task.to_dict() for task in self._tasks],
            logger=self._logger,
        )

    def _load(self) -> list[Task]:
        tasks: list[Task] = []
        for raw in load_json_list(self._store, self._key, logger=self._logger):
            task = Task.from_dict(raw) if isinstance(raw, dict) else None
            if task is None:
                self._logger.warning("Skipping malformed task entry: %r", raw)
                continue
            tasks.append(task)
        return tasks
