# src/tasky/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar

from .task_errors import DuplicateId, NotFound, PersistenceError
from .task_models import Task
from .task_validation import ensure_valid, validate_task

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskStore:
    """
    JSON file task store.

    The whole collection lives in memory and is written back in full after every
    mutation:
    - write to a sibling .tmp file
    - os.replace() it over the real file

    If the write fails the in-memory list is restored, so memory never runs ahead
    of what is on disk.
    """

    def __init__(self, path: str | Path = "db.json") -> None:
        self._path = Path(path)
        self._tasks: list[Task] = []

    @property
    def path(self) -> Path:
        return self._path

    # ---- persistence ----

    def load(self) -> None:
        """
        Read the task file into memory.

        A missing file is an empty collection. Anything unreadable or malformed
        raises PersistenceError; nothing is silently dropped.
        """
        if not self._path.exists():
            self._tasks = []
            logger.info("TaskStore: no file at %s, starting empty", self._path)
            return

        try:
            raw = self._path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"cannot read {self._path}: {e}", self._path) from e

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            raise PersistenceError(f"{self._path} is not valid JSON: {e}", self._path) from e

        if not isinstance(data, dict):
            raise PersistenceError(f"{self._path}: expected a JSON object at top level", self._path)

        records = data.get("tasks")
        if records is None:
            records = []
        if not isinstance(records, list):
            raise PersistenceError(f"{self._path}: 'tasks' must be a list", self._path)

        self._tasks = self._parse_records(records)
        logger.info("TaskStore loaded path=%s total=%d", self._path, len(self._tasks))

    def _parse_records(self, records: list[Any]) -> list[Task]:
        tasks: list[Task] = []
        seen: set[str] = set()
        for index, rec in enumerate(records):
            if not isinstance(rec, dict):
                raise PersistenceError(f"{self._path}: task #{index} is not an object", self._path)
            try:
                task = Task.from_dict(rec)
            except KeyError as e:
                raise PersistenceError(
                    f"{self._path}: task #{index} is missing field {e.args[0]!r}", self._path
                ) from e

            error = validate_task(task).first_error()
            if error is not None:
                raise PersistenceError(f"{self._path}: task #{index} is invalid ({error})", self._path)
            if task.id in seen:
                raise PersistenceError(f"{self._path}: duplicate task id {task.id!r}", self._path)
            seen.add(task.id)
            tasks.append(task)
        return tasks

    def persist(self) -> None:
        """Write the full collection; the previous file survives any failure."""
        payload = json.dumps(
            {"tasks": [t.to_dict() for t in self._tasks]},
            ensure_ascii=False,
            indent=2,
        )
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceError(f"cannot write {self._path}: {e}", self._path) from e
        logger.debug("TaskStore persisted path=%s total=%d", self._path, len(self._tasks))

    def _commit(self, mutate: Callable[[list[Task]], T]) -> T:
        """
        Apply `mutate` to a working copy of the list, persist, then keep it.

        On PersistenceError the previous list is put back before re-raising.
        """
        previous = self._tasks
        working = list(previous)
        result = mutate(working)
        self._tasks = working
        try:
            self.persist()
        except PersistenceError:
            self._tasks = previous
            logger.warning("TaskStore: persist failed, in-memory changes rolled back")
            raise
        return result

    # ---- lookups ----

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFound(task_id)

    def contains(self, task_id: str) -> bool:
        return any(t.id == task_id for t in self._tasks)

    def find_by_id(self, task_id: str) -> Task:
        return replace(self._tasks[self._index_of(task_id)])

    def count(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def snapshot(self) -> list[Task]:
        """Copies of every task in insertion order; safe to sort or edit."""
        return [replace(t) for t in self._tasks]

    # ---- mutations ----

    def add(self, task: Task) -> Task:
        ensure_valid(task)
        if self.contains(task.id):
            raise DuplicateId(task.id)

        stored = replace(task)
        self._commit(lambda tasks: tasks.append(stored))
        logger.debug("Task added id=%s priority=%s due=%s", task.id, task.priority, task.due_date)
        return replace(stored)

    def update(
        self,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        due_date: str | None = None,
        priority: int | None = None,
    ) -> Task:
        """Merge the given fields over the stored task. id, createdAt and completed are kept."""
        index = self._index_of(task_id)
        current = self._tasks[index]

        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if due_date is not None:
            changes["due_date"] = due_date
        if priority is not None:
            changes["priority"] = priority

        merged = ensure_valid(replace(current, **changes))

        def _swap(tasks: list[Task]) -> None:
            tasks[index] = merged

        self._commit(_swap)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return replace(merged)

    def set_completed(self, task_id: str) -> Task:
        index = self._index_of(task_id)
        current = self._tasks[index]
        if current.completed:
            return replace(current)

        done = replace(current, completed=True)

        def _swap(tasks: list[Task]) -> None:
            tasks[index] = done

        self._commit(_swap)
        logger.debug("Task completed id=%s", task_id)
        return replace(done)

    def remove(self, task_id: str) -> Task:
        index = self._index_of(task_id)
        removed = self._commit(lambda tasks: tasks.pop(index))
        logger.debug("Task removed id=%s", task_id)
        return replace(removed)

    def remove_completed(self) -> int:
        def _drop(tasks: list[Task]) -> int:
            before = len(tasks)
            tasks[:] = [t for t in tasks if not t.completed]
            return before - len(tasks)

        if not any(t.completed for t in self._tasks):
            return 0

        removed = self._commit(_drop)
        logger.debug("Completed tasks removed count=%d", removed)
        return removed
