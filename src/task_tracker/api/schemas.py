# src/task_tracker/api/schemas.py

"""Request bodies and the response envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..tasks.task_models import Task, TaskStatus


class TaskCreate(BaseModel):
    """Body of POST /api/tasks. `title` is checked by the route so a missing one maps to 400."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, description="Task title (required, non-blank)")
    description: str | None = Field(default=None, description="Optional free text")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Defaults to pending")


class TaskUpdate(BaseModel):
    """
    Body of PUT /api/tasks/{id}.

    Only fields present in the body are written (see `model_fields_set`);
    an explicit `"description": null` clears the description.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


def envelope(
    data: Task | list[Task] | dict[str, Any] | None = None,
    *,
    message: str | None = None,
) -> dict[str, Any]:
    out: dict[str, Any] = {"success": True}
    if isinstance(data, Task):
        out["data"] = data.to_dict()
    elif isinstance(data, list):
        out["data"] = [t.to_dict() for t in data]
    elif data is not None:
        out["data"] = data
    if message:
        out["message"] = message
    return out


def error_envelope(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}
