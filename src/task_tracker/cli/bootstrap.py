# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store into the API app,
- wires the httpx client, shell and views into a console session.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ..api.app import create_app
from ..client.api_client import TaskAPIClient
from ..client.shell import TaskAppShell
from ..config import get_settings
from ..core.state import ClientState
from ..tasks.task_store import TaskStore
from .commands import Asker, ConsoleSession

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_server_app(*, settings=None) -> FastAPI:
    """
    Build the API app from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    store = TaskStore(settings.db_path)
    return create_app(store=store, settings=settings)


def create_console_session(*, settings=None, ask: Asker = input) -> ConsoleSession:
    """Client side wiring; the caller closes session.shell.client when done."""
    if settings is None:
        settings = get_settings()

    client = TaskAPIClient(settings.api_url, timeout=settings.http_timeout_seconds)
    shell = TaskAppShell(client, ClientState(settings=settings))
    logger.debug("Console session wired to %s", settings.api_url)
    return ConsoleSession(shell=shell, ask=ask)
