# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from tasky.cli.bootstrap import create_initial_state
from tasky.config import Settings
from tasky.connectors.console_connector import run_console_loop
from tasky.tasks import task_api
from tasky.tasks.task_errors import PersistenceError

from .fakes import ScriptedPrompt


def test_state_survives_restart(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    t = task_api.add_task(state.task_store, title="Persist me", due_date="2024-01-01")

    again = create_initial_state(settings=settings)
    assert again.task_store.find_by_id(t.id) == t


def test_corrupt_file_aborts_startup(settings: SimpleNamespace) -> None:
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.write_text("{oops", "utf-8")
    with pytest.raises(PersistenceError):
        create_initial_state(settings=settings)
    # The corrupt file is left for the user to inspect.
    assert settings.tasks_path.read_text("utf-8") == "{oops"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TASKY_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.delenv("TASKY_TASKS_PATH", raising=False)
    monkeypatch.setenv("TASKY_SHOW_COMPLETED", "no")
    monkeypatch.setenv("TASKY_DEFAULT_SORT", "priority")

    s = Settings.from_env()

    assert s.data_dir == tmp_path / "d"
    assert s.tasks_path == tmp_path / "d" / "db.json"
    assert s.show_completed is False
    assert s.default_sort == "priority"


def test_console_loop_runs_commands_until_exit(state) -> None:
    prompt = ScriptedPrompt(["", "hello", "/add", "Buy milk", "", "2024-01-01", "2", "/list", "/exit", "/list"])

    run_console_loop(state, prompt)

    assert state.task_store.count() == 1
    assert any("Commands start with '/'" in s for s in prompt.said)
    assert any(s.startswith("Tasks (sorted by dueDate):") for s in prompt.said)
    # Everything after /exit is left unread.
    assert prompt.answers == ["/list"]


def test_console_loop_cancels_half_finished_command(state) -> None:
    prompt = ScriptedPrompt(["/add", "Half done"])

    run_console_loop(state, prompt)

    assert "Cancelled." in prompt.said
    assert state.task_store.count() == 0
