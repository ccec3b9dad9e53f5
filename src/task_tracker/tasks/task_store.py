# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TaskNotFoundError(LookupError):
    """No row exists for the requested task id."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: id={task_id}")
        self.task_id = task_id


class TaskStore:
    """
    SQLite task store.

    Schema:
    - one table `tasks`, created if missing
    - AUTOINCREMENT ids (never reused after delete)
    - timestamps as UNIX seconds (REAL); updated_at is never below created_at

    Thread-safety:
    - each method opens its own SQLite connection
    - update/delete run their existence check and write inside one
      BEGIN IMMEDIATE transaction, so a concurrent delete cannot slip in between
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _write_txn(self) -> Iterator[sqlite3.Connection]:
        """Connection in manual-transaction mode holding the write lock until commit."""
        conn = self._get_conn()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        statuses = ", ".join(f"'{s.value}'" for s in TaskStatus)
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                f"""
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL DEFAULT 'pending'
                        CHECK (status IN ({statuses})),
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            description=row["description"],
            status=TaskStatus.from_db(row["status"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _clean_title(title: Any) -> str:
        if title is None or not str(title).strip():
            raise ValueError("Title is required")
        return str(title).strip()

    @staticmethod
    def _clean_status(status: Any) -> TaskStatus:
        if isinstance(status, TaskStatus):
            return status
        return TaskStatus.parse(status)

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks, newest first. Ties on created_at fall back to the higher id."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY created_at DESC, id DESC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
        finally:
            conn.close()
        if row is None:
            raise TaskNotFoundError(int(task_id))
        return self._row_to_task(row)

    def create_task(
        self,
        *,
        title: str,
        description: str | None = None,
        status: TaskStatus | str = TaskStatus.PENDING,
        now_ts: float | None = None,
    ) -> Task:
        clean_title = self._clean_title(title)
        clean_status = self._clean_status(status)
        now = time.time() if now_ts is None else float(now_ts)

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(title, description, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (clean_title, description, clean_status.value, now, now),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(rowid),))
            row = cur.fetchone()
        finally:
            conn.close()

        task = self._row_to_task(row)
        logger.debug("Task created id=%s status=%s", task.id, task.status.value)
        return task

    def update_task(
        self,
        task_id: int,
        *,
        title: Any = _UNSET,
        description: Any = _UNSET,
        status: Any = _UNSET,
        now_ts: float | None = None,
    ) -> Task:
        """
        Overwrite the given fields and refresh updated_at.

        Fields left unset keep their stored value; description=None clears it.
        Raises TaskNotFoundError when the row does not exist.
        """
        fields: list[str] = []
        params: list[Any] = []

        if title is not _UNSET:
            fields.append("title = ?")
            params.append(self._clean_title(title))

        if description is not _UNSET:
            fields.append("description = ?")
            params.append(description)

        if status is not _UNSET:
            fields.append("status = ?")
            params.append(self._clean_status(status).value)

        now = time.time() if now_ts is None else float(now_ts)
        fields.append("updated_at = MAX(created_at, ?)")
        params.append(now)
        params.append(int(task_id))

        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        with self._write_txn() as conn:
            cur = conn.execute("SELECT id FROM tasks WHERE id = ?", (int(task_id),))
            if cur.fetchone() is None:
                raise TaskNotFoundError(int(task_id))
            conn.execute(sql, params)
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()

        task = self._row_to_task(row)
        logger.debug("Task updated id=%s status=%s", task.id, task.status.value)
        return task

    def delete_task(self, task_id: int) -> Task:
        """Remove the row permanently and return its content prior to deletion."""
        with self._write_txn() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            if row is None:
                raise TaskNotFoundError(int(task_id))
            conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))

        task = self._row_to_task(row)
        logger.debug("Task deleted id=%s", task.id)
        return task
