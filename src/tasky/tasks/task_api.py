# src/tasky/tasks/task_api.py

"""
Command operations: one function per user intent.

Each function takes the store explicitly, does its own validation through the
store and returns plain results. Errors from the validator and the store are
not caught here; the caller decides how to show them.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime

from ..core.ports import TaskRepo
from .task_models import Priority, Task
from .task_query import SortKey, query_tasks
from .task_validation import parse_due_date

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _normalize_due(raw: str) -> str:
    return parse_due_date(raw).isoformat()


def new_task_id(store: TaskRepo, *, now_ms: int | None = None) -> str:
    """
    Millisecond timestamp id.

    Two tasks created within the same millisecond would collide, so a -N suffix
    is appended until the id is free.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    base = str(now_ms)
    candidate = base
    n = 1
    while store.contains(candidate):
        candidate = f"{base}-{n}"
        n += 1
    return candidate


def add_task(
    store: TaskRepo,
    *,
    title: str,
    description: str = "",
    due_date: str,
    priority: int = Priority.MEDIUM,
) -> Task:
    task = Task(
        id=new_task_id(store),
        title=title.strip() if isinstance(title, str) else title,
        description=(description or "").strip(),
        due_date=_normalize_due(due_date),
        created_at=_now_iso(),
        priority=int(priority) if isinstance(priority, Priority) else priority,
        completed=False,
    )
    created = store.add(task)
    logger.info("Task created id=%s due=%s priority=%s", created.id, created.due_date, created.priority)
    return created


def list_tasks(
    store: TaskRepo,
    *,
    sort_key: SortKey | str = SortKey.DUE_DATE,
    include_completed: bool = True,
) -> list[Task]:
    return query_tasks(store.snapshot(), sort_key, include_completed)


def update_task(
    store: TaskRepo,
    task_id: str,
    *,
    title: str | None = None,
    description: str | None = None,
    due_date: str | None = None,
    priority: int | None = None,
) -> Task:
    """Fields left as None keep their stored value."""
    # Surface NotFound before parsing any of the new values.
    store.find_by_id(task_id)

    updated = store.update(
        task_id,
        title=title.strip() if isinstance(title, str) else title,
        description=description.strip() if isinstance(description, str) else description,
        due_date=_normalize_due(due_date) if due_date is not None else None,
        priority=int(priority) if isinstance(priority, Priority) else priority,
    )
    logger.info("Task updated id=%s", task_id)
    return updated


def complete_task(store: TaskRepo, task_id: str) -> Task:
    task = store.set_completed(task_id)
    logger.info("Task marked completed id=%s", task_id)
    return task


def remove_task(store: TaskRepo, task_id: str) -> Task:
    """Caller is responsible for asking the user to confirm first."""
    removed = store.remove(task_id)
    logger.info("Task removed id=%s", task_id)
    return removed


def clear_completed(store: TaskRepo) -> int:
    """Caller is responsible for asking the user to confirm first."""
    count = store.remove_completed()
    logger.info("Cleared completed tasks count=%d", count)
    return count


def pending_tasks(store: TaskRepo) -> list[Task]:
    return [t for t in store.snapshot() if not t.completed]


def completed_tasks(store: TaskRepo) -> list[Task]:
    return [t for t in store.snapshot() if t.completed]
