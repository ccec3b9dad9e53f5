# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from task_tracker.api.app import create_app
from task_tracker.client.api_client import TaskAPIClient
from task_tracker.client.shell import TaskAppShell
from task_tracker.core.state import ClientState
from task_tracker.tasks.task_store import TaskStore

from .fakes import FakeTaskClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the app factory and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "tasks.sqlite3",
        host="127.0.0.1",
        port=5000,
        cors_origins=["*"],
        api_url="http://testserver/api",
        http_timeout_seconds=5.0,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.db_path)


@pytest.fixture()
def http(store: TaskStore, settings: SimpleNamespace) -> Iterator[TestClient]:
    """TestClient over the real app and a real (tmp) SQLite store."""
    app = create_app(store=store, settings=settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def api_client(http: TestClient) -> TaskAPIClient:
    """TaskAPIClient talking to the in-process app through the TestClient transport."""
    return TaskAPIClient(http=http, prefix="/api")


@pytest.fixture()
def fake_client() -> FakeTaskClient:
    return FakeTaskClient()


@pytest.fixture()
def shell(fake_client: FakeTaskClient) -> TaskAppShell:
    return TaskAppShell(fake_client, ClientState())
