# tests/test_task_store.py

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

import pytest

from task_tracker.tasks.task_models import Task, TaskStatus
from task_tracker.tasks.task_store import TaskNotFoundError, TaskStore


def test_create_with_title_only_defaults(store: TaskStore) -> None:
    task = store.create_task(title="Buy milk")

    assert task.id > 0
    assert task.title == "Buy milk"
    assert task.status == TaskStatus.PENDING
    assert task.description is None
    assert task.created_at == task.updated_at
    assert store.count_tasks() == 1


def test_create_requires_title_and_persists_nothing(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.create_task(title="   ")
    with pytest.raises(ValueError):
        store.create_task(title=None)  # type: ignore[arg-type]
    assert store.count_tasks() == 0


def test_create_rejects_unknown_status(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.create_task(title="x", status="done")
    assert store.count_tasks() == 0


def test_list_orders_by_created_at_desc(store: TaskStore) -> None:
    # ids ascend while created_at does not
    a = store.create_task(title="a", now_ts=2_000.0)
    b = store.create_task(title="b", now_ts=1_000.0)
    c = store.create_task(title="c", now_ts=3_000.0)

    assert [t.id for t in store.list_tasks()] == [c.id, a.id, b.id]


def test_list_ties_fall_back_to_id(store: TaskStore) -> None:
    first = store.create_task(title="first", now_ts=5.0)
    second = store.create_task(title="second", now_ts=5.0)
    assert [t.id for t in store.list_tasks()] == [second.id, first.id]


def test_update_changes_only_given_fields(store: TaskStore) -> None:
    task = store.create_task(title="t", description="keep me", now_ts=100.0)

    updated = store.update_task(task.id, status=TaskStatus.COMPLETED, now_ts=200.0)

    assert updated.status == TaskStatus.COMPLETED
    assert updated.title == "t"
    assert updated.description == "keep me"
    assert updated.created_at == 100.0
    assert updated.updated_at == 200.0


def test_update_can_clear_description(store: TaskStore) -> None:
    task = store.create_task(title="t", description="d")
    assert store.update_task(task.id, description=None).description is None


def test_update_never_moves_updated_at_before_created_at(store: TaskStore) -> None:
    task = store.create_task(title="t", now_ts=500.0)
    updated = store.update_task(task.id, title="t2", now_ts=10.0)
    assert updated.updated_at == 500.0
    assert updated.updated_at >= updated.created_at


def test_update_validates_title_and_status(store: TaskStore) -> None:
    task = store.create_task(title="t")
    with pytest.raises(ValueError):
        store.update_task(task.id, title="")
    with pytest.raises(ValueError):
        store.update_task(task.id, status="archived")
    assert store.get_task(task.id).title == "t"


def test_missing_rows_raise_not_found(store: TaskStore) -> None:
    with pytest.raises(TaskNotFoundError):
        store.get_task(999999)
    with pytest.raises(TaskNotFoundError):
        store.update_task(999999, title="x")
    with pytest.raises(TaskNotFoundError):
        store.delete_task(999999)


def test_delete_returns_prior_row_then_not_found(store: TaskStore) -> None:
    task = store.create_task(title="gone", description="soon")
    deleted = store.delete_task(task.id)

    assert deleted == task
    with pytest.raises(TaskNotFoundError):
        store.get_task(task.id)
    assert store.count_tasks() == 0


def _hold_write_lock(store: TaskStore) -> sqlite3.Connection:
    """Second connection holding the database write lock until COMMIT/close."""
    conn = sqlite3.connect(str(store.db_path), isolation_level=None, timeout=30.0)
    conn.execute("BEGIN IMMEDIATE")
    return conn


def test_update_blocked_by_writer_sees_its_delete(store: TaskStore) -> None:
    task = store.create_task(title="t")
    outcomes: list[object] = []

    def run() -> None:
        try:
            outcomes.append(store.update_task(task.id, title="late"))
        except TaskNotFoundError as e:
            outcomes.append(e)

    lock = _hold_write_lock(store)
    try:
        worker = threading.Thread(target=run)
        worker.start()
        worker.join(timeout=0.2)
        # cannot take the write lock while it is held
        assert worker.is_alive()
        lock.execute("DELETE FROM tasks WHERE id = ?", (task.id,))
        lock.execute("COMMIT")
    finally:
        lock.close()

    worker.join(timeout=10.0)
    assert not worker.is_alive()
    assert len(outcomes) == 1
    assert isinstance(outcomes[0], TaskNotFoundError)
    assert store.count_tasks() == 0


def test_racing_deletes_return_the_row_once(store: TaskStore) -> None:
    task = store.create_task(title="t", description="d")
    outcomes: list[object] = []

    def run() -> None:
        try:
            outcomes.append(store.delete_task(task.id))
        except TaskNotFoundError as e:
            outcomes.append(e)

    workers = [threading.Thread(target=run) for _ in range(2)]
    lock = _hold_write_lock(store)
    try:
        for w in workers:
            w.start()
        for w in workers:
            w.join(timeout=0.2)
        assert all(w.is_alive() for w in workers)
    finally:
        lock.close()

    for w in workers:
        w.join(timeout=10.0)
    assert not any(w.is_alive() for w in workers)
    assert [o for o in outcomes if isinstance(o, Task)] == [task]
    assert len([o for o in outcomes if isinstance(o, TaskNotFoundError)]) == 1
    assert store.count_tasks() == 0


def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    first = store.create_task(title="one")
    store.delete_task(first.id)
    second = store.create_task(title="two")
    assert second.id > first.id


def test_schema_rejects_bad_status_written_directly(store: TaskStore) -> None:
    conn = sqlite3.connect(str(store.db_path))
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO tasks(title, status, created_at, updated_at) VALUES ('x', 'nope', 0, 0)"
            )
    finally:
        conn.close()


def test_reopen_keeps_rows(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "tasks.sqlite3"
    TaskStore(db).create_task(title="persisted")
    again = TaskStore(db)
    assert [t.title for t in again.list_tasks()] == ["persisted"]
