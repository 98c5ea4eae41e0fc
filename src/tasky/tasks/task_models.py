# src/tasky/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class Priority(IntEnum):
    """Task priority. Lower number = more urgent."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    due_date: str
    created_at: str
    priority: int
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Persisted record; keys match the on-disk document."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "priority": self.priority,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a Task from a persisted record.

        Raises KeyError when a required key is missing. Value checks are left to
        the validator so that a bad record is reported with the offending field.
        """
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            due_date=data["dueDate"],
            created_at=data["createdAt"],
            priority=data["priority"],
            completed=data.get("completed", False),
        )
