# src/task_tracker/client/views.py

"""
Text views driven by the Application Shell state.

TaskListView and TaskFormView are presentation/input only: they never talk to
the API themselves, they render strings and invoke the callbacks they are given.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..tasks.task_models import Task, TaskStatus

STATUS_ICONS = {
    TaskStatus.PENDING: "📋",
    TaskStatus.IN_PROGRESS: "⚡",
    TaskStatus.COMPLETED: "✅",
}

STATUS_LABELS = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}

_DAY = 24 * 60 * 60


def format_relative_date(ts: float, now: float | None = None) -> str:
    if now is None:
        now = time.time()
    diff_days = int(abs(now - ts) // _DAY)
    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    dt = datetime.fromtimestamp(ts).astimezone()
    return f"{dt.strftime('%b')} {dt.day}"


def render_header(stats: dict[str, int], error: str = "") -> str:
    lines = [
        f"Total: {stats.get('total', 0)} | "
        f"Pending: {stats.get('pending', 0)} | "
        f"In Progress: {stats.get('in_progress', 0)} | "
        f"Completed: {stats.get('completed', 0)}"
    ]
    if error:
        lines.append(f"[!] {error}")
    return "\n".join(lines)


class TaskListView:
    """Renders the task list and gates deletes behind a confirm step."""

    def render(self, tasks: list[Task], *, loading: bool = False, now: float | None = None) -> str:
        if loading:
            return "Loading tasks..."
        if not tasks:
            return "No tasks yet\nUse /new to create your first task."

        lines: list[str] = []
        for task in tasks:
            icon = STATUS_ICONS.get(task.status, STATUS_ICONS[TaskStatus.PENDING])
            lines.append(f"{icon} #{task.id} {task.title}  ({format_relative_date(task.created_at, now)})")
            if task.description:
                lines.append(f"    {task.description}")
            footer = f"    [{task.status.value.replace('-', ' ').upper()}]"
            if task.updated_at != task.created_at:
                footer += f"  Updated {format_relative_date(task.updated_at, now)}"
            lines.append(footer)
        return "\n".join(lines)

    @staticmethod
    def delete_prompt(task: Task) -> str:
        return f'Delete "{task.title}"? This action cannot be undone.'

    def request_delete(
        self,
        task: Task,
        confirm: Callable[[str], bool],
        on_delete: Callable[[int], Any],
    ) -> bool:
        """Invoke on_delete(task.id) only if confirm(prompt) agrees."""
        if not confirm(self.delete_prompt(task)):
            return False
        on_delete(task.id)
        return True


class TaskFormView:
    """
    Form state for create/edit.

    load() pre-populates from the task being edited (or resets for create);
    submit() validates the title, calls on_submit, and resets after a
    successful create only. Editing exits back to the list, so there is
    nothing to reset.
    """

    def __init__(self) -> None:
        self.editing: Task | None = None
        self.title = ""
        self.description = ""
        self.status = TaskStatus.PENDING
        self.error = ""

    def reset(self) -> None:
        self.title = ""
        self.description = ""
        self.status = TaskStatus.PENDING
        self.error = ""

    def load(self, editing_task: Task | None) -> None:
        self.editing = editing_task
        if editing_task is None:
            self.reset()
            return
        self.title = editing_task.title
        self.description = editing_task.description or ""
        self.status = editing_task.status
        self.error = ""

    def set_field(self, name: str, value: str) -> None:
        if name == "title":
            self.title = value
        elif name == "description":
            self.description = value
        elif name == "status":
            self.status = TaskStatus.parse(value)
        else:
            raise KeyError(name)

    def validate(self) -> str | None:
        if not self.title.strip():
            return "Please enter a task title"
        return None

    def data(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
        }

    def submit(self, on_submit: Callable[[dict[str, Any]], Any]) -> bool:
        problem = self.validate()
        if problem:
            self.error = problem
            return False
        self.error = ""

        result = on_submit(self.data())
        if result is None:
            return False
        if self.editing is None:
            self.reset()
        return True

    def render(self) -> str:
        heading = "Edit Task" if self.editing is not None else "Create New Task"
        options = "  ".join(
            f"[{'x' if s == self.status else ' '}] {STATUS_ICONS[s]} {STATUS_LABELS[s]}" for s in TaskStatus
        )
        lines = [
            heading,
            f"  Title:       {self.title}",
            f"  Description: {self.description}",
            f"  Status:      {options}",
        ]
        if self.error:
            lines.append(f"  [!] {self.error}")
        return "\n".join(lines)
