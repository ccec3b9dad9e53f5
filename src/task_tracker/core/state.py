# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ..tasks.task_models import Task


class View(StrEnum):
    LIST = "list"
    FORM = "form"


@dataclass
class ClientState:
    """
    Client-side state owned by the Application Shell.

    `tasks` is an advisory copy of the server collection; it is only ever
    replaced or patched from API responses.
    """

    # Store Settings on the state for easy access in connectors.
    settings: object | None = None

    tasks: list[Task] = field(default_factory=list)
    loading: bool = False
    error: str = ""
    editing_task: Task | None = None
    view: View = View.LIST

    # Toast-style confirmations ("Task created!"), newest last.
    notices: list[str] = field(default_factory=list)
