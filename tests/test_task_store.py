# tests/test_task_store.py

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from tasky.tasks.task_errors import DuplicateId, NotFound, PersistenceError, ValidationError
from tasky.tasks.task_store import TaskStore

from .fakes import make_task


def _reload(path: Path) -> TaskStore:
    fresh = TaskStore(path)
    fresh.load()
    return fresh


def test_load_missing_file_is_empty(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "nope" / "db.json")
    store.load()
    assert store.count() == 0
    assert store.snapshot() == []


@pytest.mark.parametrize("doc", ["{}", '{"tasks": null}', '{"tasks": []}', ""])
def test_load_tolerates_absent_tasks_field(tmp_path: Path, doc: str) -> None:
    path = tmp_path / "db.json"
    path.write_text(doc, "utf-8")
    assert _reload(path).count() == 0


@pytest.mark.parametrize(
    "doc",
    [
        "{not json",
        "[]",
        '{"tasks": {}}',
        '{"tasks": [1]}',
        '{"tasks": [{"id": "a"}]}',
        '{"tasks": [{"id": "a", "title": "", "dueDate": "2024-01-01", '
        '"createdAt": "x", "priority": 1}]}',
    ],
)
def test_load_corrupt_file_raises(tmp_path: Path, doc: str) -> None:
    path = tmp_path / "db.json"
    path.write_text(doc, "utf-8")
    with pytest.raises(PersistenceError) as exc:
        _reload(path)
    assert exc.value.path == path


def test_load_invalid_utf8_raises(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_bytes(b'{"tasks": [\xff\xfe]}')
    with pytest.raises(PersistenceError) as exc:
        _reload(path)
    assert exc.value.path == path


@pytest.mark.parametrize("due", ["2024/01/05", "2024-1-5"])
def test_load_accepts_loose_due_dates(tmp_path: Path, due: str) -> None:
    path = tmp_path / "db.json"
    path.write_text(json.dumps({"tasks": [make_task("a", due_date=due).to_dict()]}), "utf-8")
    fresh = _reload(path)
    assert fresh.find_by_id("a").due_date == due


def test_load_rejects_duplicate_ids(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    rec = make_task("same").to_dict()
    path.write_text(json.dumps({"tasks": [rec, rec]}), "utf-8")
    with pytest.raises(PersistenceError, match="duplicate"):
        _reload(path)


def test_round_trip_preserves_every_field(store: TaskStore) -> None:
    store.add(make_task("a", title="One", description="first", priority=1))
    store.add(make_task("b", title="Two", due_date="2025-06-30", priority=3))
    store.set_completed("b")

    fresh = _reload(store.path)
    assert fresh.snapshot() == store.snapshot()
    assert [t.id for t in fresh.snapshot()] == ["a", "b"]

    doc = json.loads(store.path.read_text("utf-8"))
    assert set(doc) == {"tasks"}
    assert set(doc["tasks"][0]) == {
        "id", "title", "description", "dueDate", "createdAt", "priority", "completed",
    }
    assert doc["tasks"][1]["completed"] is True


def test_add_duplicate_id_fails_without_change(store: TaskStore) -> None:
    store.add(make_task("a"))
    with pytest.raises(DuplicateId):
        store.add(make_task("a", title="Other"))
    assert store.count() == 1
    assert store.find_by_id("a").title == "Buy milk"


def test_add_invalid_task_leaves_store_and_file_untouched(store: TaskStore) -> None:
    with pytest.raises(ValidationError):
        store.add(make_task("a", title=" "))
    assert store.count() == 0
    assert not store.path.exists()


def test_find_by_id_returns_copy(store: TaskStore) -> None:
    store.add(make_task("a"))
    found = store.find_by_id("a")
    found.title = "mutated"
    assert store.find_by_id("a").title == "Buy milk"


def test_missing_id_raises_not_found(store: TaskStore) -> None:
    with pytest.raises(NotFound):
        store.find_by_id("x")
    with pytest.raises(NotFound):
        store.update("x", title="t")
    with pytest.raises(NotFound):
        store.set_completed("x")
    with pytest.raises(NotFound):
        store.remove("x")


def test_update_merges_and_keeps_identity(store: TaskStore) -> None:
    original = store.add(make_task("a", description="keep me"))
    store.set_completed("a")

    updated = store.update("a", title="Buy oat milk", priority=1)

    assert updated.title == "Buy oat milk"
    assert updated.priority == 1
    assert updated.description == "keep me"
    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.completed is True
    assert _reload(store.path).find_by_id("a") == updated


def test_update_invalid_leaves_stored_task(store: TaskStore) -> None:
    store.add(make_task("a"))
    with pytest.raises(ValidationError):
        store.update("a", priority=9)
    assert store.find_by_id("a").priority == 2


def test_set_completed_is_idempotent(store: TaskStore) -> None:
    store.add(make_task("a"))
    assert store.set_completed("a").completed is True
    assert store.set_completed("a").completed is True
    assert _reload(store.path).find_by_id("a").completed is True


def test_remove_completed_counts(store: TaskStore) -> None:
    assert store.remove_completed() == 0
    for tid in ("a", "b", "c"):
        store.add(make_task(tid))
    store.set_completed("a")
    store.set_completed("c")

    assert store.remove_completed() == 2
    assert [t.id for t in store.snapshot()] == ["b"]
    assert [t.id for t in _reload(store.path).snapshot()] == ["b"]


def test_failed_persist_rolls_back_memory_and_keeps_file(
    store: TaskStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    store.add(make_task("a"))
    store.add(make_task("c"))
    store.set_completed("c")
    before_disk = store.path.read_text("utf-8")
    before_mem = store.snapshot()

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", boom)

    with pytest.raises(PersistenceError):
        store.add(make_task("b"))
    with pytest.raises(PersistenceError):
        store.set_completed("a")
    with pytest.raises(PersistenceError):
        store.update("a", title="changed")
    with pytest.raises(PersistenceError):
        store.remove("a")
    with pytest.raises(PersistenceError):
        store.remove_completed()

    assert store.snapshot() == before_mem
    assert store.path.read_text("utf-8") == before_disk
    assert not list(store.path.parent.glob("*.tmp"))
