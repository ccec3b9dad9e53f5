# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used across the app.

The API depends on a TaskRepo, the Application Shell on a TaskClient.
Concrete implementations (SQLite store, httpx client) are wired in cli/bootstrap.py,
tests swap in fakes.
"""

from typing import Any, Protocol

Envelope = dict[str, Any]
# {"success": bool, "data": ..., "error": str, "message": str}


class TaskRepo(Protocol):
    """Store-access interface: five operations plus a row count for health checks."""

    def list_tasks(self) -> list[Any]: ...
    def get_task(self, task_id: int) -> Any: ...

    def create_task(
            self,
            *,
            title: str,
            description: str | None = None,
            status: Any = None,  # TaskStatus | str
    ) -> Any: ...

    def update_task(
            self,
            task_id: int,
            *,
            title: Any = ...,
            description: Any = ...,
            status: Any = ...,
    ) -> Any: ...

    def delete_task(self, task_id: int) -> Any: ...
    def count_tasks(self) -> int: ...


class TaskClient(Protocol):
    """Transport used by the Application Shell. Every method returns the decoded envelope."""

    def get_all_tasks(self) -> Envelope: ...
    def get_task(self, task_id: int) -> Envelope: ...
    def create_task(self, data: dict[str, Any]) -> Envelope: ...
    def update_task(self, task_id: int, data: dict[str, Any]) -> Envelope: ...
    def delete_task(self, task_id: int) -> Envelope: ...
