# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasky.cli.bootstrap import create_initial_state
from tasky.core.state import AppState
from tasky.tasks.task_store import TaskStore

from .fakes import ScriptedPrompt


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="tasky",
        log_level="WARNING",
        data_dir=tmp_path / "data",
        tasks_path=tmp_path / "data" / "db.json",
        default_sort="dueDate",
        show_completed=True,
    )


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    s = TaskStore(tmp_path / "db.json")
    s.load()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState built through the real bootstrap.

    NOTE: the TaskStore writes a real file under tmp_path because persistence
    behaviour is part of what we want to test.
    """
    return create_initial_state(settings=settings)


@pytest.fixture()
def prompt() -> ScriptedPrompt:
    return ScriptedPrompt()
