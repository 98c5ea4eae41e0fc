# src/tasky/tasks/task_validation.py

"""
Field rules for Task records.

Every task is checked here before it enters the store and again before an
edited version replaces the stored one. Loaded records go through the same
rules so a hand-edited file cannot smuggle in a bad task.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

from .task_errors import ValidationError
from .task_models import Priority, Task

VALID_PRIORITIES = frozenset(p.value for p in Priority)

# Looser form written by older files: 2024/1/5, 2024-1-5, optionally followed by a time.
_LOOSE_DATE_RE = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?:[T ]\d{1,2}:\d{2}(?::\d{2})?)?$")


@dataclass(slots=True, frozen=True)
class FieldIssue:
    field: str
    reason: str


@dataclass(slots=True, frozen=True)
class ValidationResult:
    issues: tuple[FieldIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues

    def first_error(self) -> ValidationError | None:
        if not self.issues:
            return None
        issue = self.issues[0]
        return ValidationError(issue.field, issue.reason)


def parse_due_date(text: str) -> date:
    """
    Parse a due date.

    Accepts an ISO calendar date (YYYY-MM-DD), a full ISO date-time, or the
    looser YYYY/M/D and YYYY-M-D forms with an optional time. Only the date
    part is kept; impossible dates are rejected.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("dueDate", "due date is required")
    raw = text.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    m = _LOOSE_DATE_RE.match(raw)
    if m is not None:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            pass
    raise ValidationError("dueDate", f"invalid date {raw!r} (expected YYYY-MM-DD)")


def is_valid_priority(value: object) -> bool:
    # bool is an int subclass; True must not pass as High.
    return isinstance(value, int) and not isinstance(value, bool) and value in VALID_PRIORITIES


def validate_task(task: Task) -> ValidationResult:
    issues: list[FieldIssue] = []

    if not isinstance(task.id, str) or not task.id.strip():
        issues.append(FieldIssue("id", "id must be a non-empty string"))

    if not isinstance(task.title, str) or not task.title.strip():
        issues.append(FieldIssue("title", "title cannot be empty"))

    if not isinstance(task.description, str):
        issues.append(FieldIssue("description", "description must be text"))

    try:
        parse_due_date(task.due_date)
    except ValidationError as e:
        issues.append(FieldIssue(e.field, e.reason))

    if not isinstance(task.created_at, str) or not task.created_at.strip():
        issues.append(FieldIssue("createdAt", "createdAt must be a non-empty string"))

    if not is_valid_priority(task.priority):
        issues.append(FieldIssue("priority", f"priority must be 1, 2 or 3 (got {task.priority!r})"))

    if not isinstance(task.completed, bool):
        issues.append(FieldIssue("completed", "completed must be true or false"))

    return ValidationResult(tuple(issues))


def ensure_valid(task: Task) -> Task:
    """Return the task unchanged, or raise ValidationError for its first problem."""
    error = validate_task(task).first_error()
    if error is not None:
        raise error
    return task
