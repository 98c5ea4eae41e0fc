# src/tasky/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes settings once,
- ensures the local (gitignored) data directory exists,
- builds the TaskStore and loads it into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Raises PersistenceError if the task file exists but cannot be read or parsed;
    the caller should treat that as fatal rather than start over with an empty list.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_path)
    store.load()

    return AppState(settings=settings, task_store=store)
