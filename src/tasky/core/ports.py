# src/tasky/core/ports.py

"""
Ports (interfaces) used by the core.

Command operations depend on these Protocols rather than on concrete classes,
which keeps the storage swappable and the interactive layer out of the core.
"""

from __future__ import annotations

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    # Reads
    def contains(self, task_id: str) -> bool: ...
    def find_by_id(self, task_id: str) -> Task: ...
    def snapshot(self) -> list[Task]: ...

    # Mutations (each one persists before returning)
    def add(self, task: Task) -> Task: ...
    def update(
            self,
            task_id: str,
            *,
            title: str | None = None,
            description: str | None = None,
            due_date: str | None = None,
            priority: int | None = None,
    ) -> Task: ...
    def set_completed(self, task_id: str) -> Task: ...
    def remove(self, task_id: str) -> Task: ...
    def remove_completed(self) -> int: ...


class Prompt(Protocol):
    """
    Blocking user input, supplied by the connector.

    `ask` returns the raw answer ('' when the user just presses Enter) and may
    raise EOFError/KeyboardInterrupt when the user gives up. `say` shows a short
    note, e.g. why an answer was rejected.
    """

    def ask(self, question: str) -> str: ...
    def say(self, message: str) -> None: ...
