# src/task_tracker/api/routes.py

"""
REST router for /api/tasks.

Every handler answers with the envelope {success, data?, error?, message?}.
Store exceptions are logged here and turned into a generic 500; the raw
error text never goes back to the client.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from ..core.ports import TaskRepo
from ..tasks.task_store import TaskNotFoundError
from .schemas import TaskCreate, TaskUpdate, envelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

NOT_FOUND = "Task not found"

# SQLite INTEGER range; larger ids cannot exist and are rejected as 400.
TaskId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]


def get_store(request: Request) -> TaskRepo:
    return request.app.state.store


@router.get("")
def list_tasks(store: TaskRepo = Depends(get_store)) -> dict[str, Any]:
    try:
        tasks = store.list_tasks()
    except Exception:
        logger.exception("Error getting tasks")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get tasks") from None
    return envelope(tasks)


@router.get("/{task_id}")
def get_task(task_id: TaskId, store: TaskRepo = Depends(get_store)) -> dict[str, Any]:
    try:
        task = store.get_task(task_id)
    except TaskNotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND) from None
    except Exception:
        logger.exception("Error getting task id=%s", task_id)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get task") from None
    return envelope(task)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate | None = None,
    store: TaskRepo = Depends(get_store),
) -> dict[str, Any]:
    payload = payload or TaskCreate()
    if payload.title is None or not payload.title.strip():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Title is required")

    try:
        task = store.create_task(
            title=payload.title,
            description=payload.description,
            status=payload.status,
        )
    except ValueError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e)) from None
    except Exception:
        logger.exception("Error creating task")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create task") from None

    logger.info("Task created id=%s", task.id)
    return envelope(task, message="Task created successfully")


def existing_task_id(task_id: TaskId, store: TaskRepo = Depends(get_store)) -> int:
    """
    Resolve the id before the body is validated, so an unknown id answers 404
    whatever the body holds. The store re-checks inside its write transaction.
    """
    try:
        store.get_task(task_id)
    except TaskNotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND) from None
    except Exception:
        logger.exception("Error updating task id=%s", task_id)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update task") from None
    return task_id


@router.put("/{task_id}")
def update_task(
    task_id: int = Depends(existing_task_id),
    payload: TaskUpdate | None = None,
    store: TaskRepo = Depends(get_store),
) -> dict[str, Any]:
    changes = payload.changes() if payload is not None else {}
    if "title" in changes and (changes["title"] is None or not str(changes["title"]).strip()):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Title is required")

    try:
        task = store.update_task(task_id, **changes)
    except TaskNotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND) from None
    except ValueError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e)) from None
    except Exception:
        logger.exception("Error updating task id=%s", task_id)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update task") from None

    logger.info("Task updated id=%s fields=%s", task.id, sorted(changes))
    return envelope(task, message="Task updated successfully")


@router.delete("/{task_id}")
def delete_task(task_id: TaskId, store: TaskRepo = Depends(get_store)) -> dict[str, Any]:
    try:
        task = store.delete_task(task_id)
    except TaskNotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND) from None
    except Exception:
        logger.exception("Error deleting task id=%s", task_id)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete task") from None

    logger.info("Task deleted id=%s", task.id)
    return envelope(task, message="Task deleted successfully")
