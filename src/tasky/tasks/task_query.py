# src/tasky/tasks/task_query.py

"""
Filtering and ordering of task snapshots for display.

Pure functions: input sequences are never modified. Sorting relies on Python's
stable sort, so tasks with equal keys keep their original relative order.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from .task_models import Task
from .task_validation import parse_due_date


class SortKey(StrEnum):
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    CREATED_AT = "createdAt"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str) -> SortKey:
        """Accept the field name (any case) or a short alias like 'due' or 'prio'."""
        key = (raw or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        try:
            return _ALIASES[key]
        except KeyError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown sort key {raw!r} (choose one of: {choices})") from None


_ALIASES: dict[str, SortKey] = {
    "due": SortKey.DUE_DATE,
    "due_date": SortKey.DUE_DATE,
    "prio": SortKey.PRIORITY,
    "created": SortKey.CREATED_AT,
    "created_at": SortKey.CREATED_AT,
    "status": SortKey.COMPLETED,
    "done": SortKey.COMPLETED,
}


def _due_key(task: Task) -> date:
    return parse_due_date(task.due_date)


def _created_key(task: Task) -> tuple[int, float]:
    # Naive timestamps are read as local time; unparseable ones go last.
    try:
        ts = datetime.fromisoformat(task.created_at.strip()).astimezone().timestamp()
    except (AttributeError, ValueError, OverflowError, OSError):
        return (1, math.inf)
    return (0, ts)


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.DUE_DATE: _due_key,
    SortKey.PRIORITY: lambda t: t.priority,
    SortKey.CREATED_AT: _created_key,
    SortKey.COMPLETED: lambda t: t.completed,
}


def query_tasks(
    tasks: Iterable[Task],
    sort_key: SortKey | str = SortKey.DUE_DATE,
    include_completed: bool = True,
) -> list[Task]:
    """Filter (optionally dropping completed tasks), then sort by `sort_key`."""
    key = sort_key if isinstance(sort_key, SortKey) else SortKey.parse(sort_key)

    selected = [t for t in tasks if include_completed or not t.completed]
    return sorted(selected, key=_SORT_KEYS[key])
