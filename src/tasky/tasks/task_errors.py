# src/tasky/tasks/task_errors.py

from __future__ import annotations

from pathlib import Path


class TaskError(Exception):
    """Base class for every error the task subsystem raises on purpose."""


class ValidationError(TaskError, ValueError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class NotFound(TaskError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"no task with id {task_id!r}")
        self.task_id = task_id


class DuplicateId(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"a task with id {task_id!r} already exists")
        self.task_id = task_id


class PersistenceError(TaskError):
    """Task file could not be read, parsed or written."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
