# src/task_tracker/client/shell.py

"""
Application Shell.

Owns the ClientState and routes user intent (create/edit/delete/navigate) to
the TaskClient, then reconciles the local collection from the responses:

- load:   replace the collection (never cleared on failure)
- create: prepend the returned task
- update: replace the matching entry in place
- delete: drop the matching entry

Failures become a static, non-specific error message on the state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..core.ports import TaskClient
from ..core.state import ClientState, View
from ..tasks.task_models import Task, TaskStatus
from .api_client import TaskAPIError

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]

LOAD_FAILED = "Failed to load tasks"
CONNECT_FAILED = "Failed to connect to server"
CREATE_FAILED = "Failed to create task"
UPDATE_FAILED = "Failed to update task"
DELETE_FAILED = "Failed to delete task"
TASK_MISSING = "Task no longer exists"


class TaskAppShell:
    def __init__(
        self,
        client: TaskClient,
        state: ClientState | None = None,
        *,
        notify: Notifier | None = None,
    ) -> None:
        self.client = client
        self.state = state if state is not None else ClientState()
        self._notify = notify

    # ---- helpers ----

    def _toast(self, message: str) -> None:
        self.state.notices.append(message)
        logger.debug("Toast: %s", message)
        if self._notify is not None:
            self._notify(message)

    @staticmethod
    def _task_from(response: dict[str, Any]) -> Task | None:
        data = response.get("data")
        if not response.get("success") or not isinstance(data, dict):
            return None
        return Task.from_dict(data)

    # ---- lifecycle ----

    def mount(self) -> None:
        self.load_tasks()

    def load_tasks(self) -> bool:
        self.state.loading = True
        try:
            response = self.client.get_all_tasks()
            data = response.get("data")
            if response.get("success") and isinstance(data, list):
                self.state.tasks = [Task.from_dict(d) for d in data]
                return True
            self.state.error = LOAD_FAILED
            return False
        except TaskAPIError:
            logger.info("Load tasks failed", exc_info=True)
            self.state.error = CONNECT_FAILED
            return False
        finally:
            self.state.loading = False

    def refresh_task(self, task_id: int) -> Task | None:
        """
        Fetch one task and patch the local copy: replaced when present,
        dropped when the server no longer has it.
        """
        try:
            task = self._task_from(self.client.get_task(task_id))
        except TaskAPIError as e:
            if e.status_code == 404:
                self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
                self.state.error = TASK_MISSING
            else:
                logger.info("Fetch task failed id=%s", task_id, exc_info=True)
                self.state.error = CONNECT_FAILED
            return None
        if task is None:
            self.state.error = LOAD_FAILED
            return None

        self.state.tasks = [task if t.id == task.id else t for t in self.state.tasks]
        self.state.error = ""
        return task

    # ---- mutations ----

    def create_task(self, data: dict[str, Any]) -> Task | None:
        try:
            task = self._task_from(self.client.create_task(data))
        except TaskAPIError:
            logger.info("Create task failed", exc_info=True)
            self.state.error = CREATE_FAILED
            return None
        if task is None:
            self.state.error = CREATE_FAILED
            return None

        self.state.tasks = [task, *self.state.tasks]
        self.state.error = ""
        self.state.view = View.LIST
        self._toast("Task created!")
        return task

    def update_task(self, data: dict[str, Any]) -> Task | None:
        editing = self.state.editing_task
        if editing is None:
            raise RuntimeError("update_task called without a task being edited")

        try:
            task = self._task_from(self.client.update_task(editing.id, data))
        except TaskAPIError:
            logger.info("Update task failed id=%s", editing.id, exc_info=True)
            self.state.error = UPDATE_FAILED
            return None
        if task is None:
            self.state.error = UPDATE_FAILED
            return None

        self.state.tasks = [task if t.id == editing.id else t for t in self.state.tasks]
        self.state.editing_task = None
        self.state.view = View.LIST
        self.state.error = ""
        self._toast("Task updated!")
        return task

    def delete_task(self, task_id: int) -> bool:
        try:
            response = self.client.delete_task(task_id)
        except TaskAPIError:
            logger.info("Delete task failed id=%s", task_id, exc_info=True)
            self.state.error = DELETE_FAILED
            return False
        if not response.get("success"):
            self.state.error = DELETE_FAILED
            return False

        self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
        self.state.error = ""
        self.state.view = View.LIST
        self.state.editing_task = None
        self._toast("Task deleted!")
        return True

    # ---- navigation ----

    def show_list(self) -> None:
        self.state.view = View.LIST

    def start_create(self) -> None:
        self.state.editing_task = None
        self.state.view = View.FORM

    def start_edit(self, task: Task) -> None:
        self.state.editing_task = task
        self.state.view = View.FORM

    def cancel_edit(self) -> None:
        self.state.editing_task = None
        self.state.view = View.LIST

    def submit_form(self, data: dict[str, Any]) -> Task | None:
        if self.state.editing_task is not None:
            return self.update_task(data)
        return self.create_task(data)

    # ---- derived ----

    def find_task(self, task_id: int) -> Task | None:
        for t in self.state.tasks:
            if t.id == task_id:
                return t
        return None

    def stats(self) -> dict[str, int]:
        tasks = self.state.tasks
        return {
            "completed": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            "in_progress": sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            "pending": sum(1 for t in tasks if t.status == TaskStatus.PENDING),
            "total": len(tasks),
        }
