# src/task_tracker/api/app.py

"""
FastAPI application factory.

create_app() wires a TaskRepo into app.state and installs the handlers that
keep every error response in the envelope shape:
- HTTPException (404/400/500 raised by routes, unknown routes) -> {success: false, error}
- request validation errors (bad JSON, unknown status, non-integer id) -> 400
- anything unexpected -> logged, 500
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import get_settings
from ..core.ports import TaskRepo
from ..tasks.task_store import TaskStore
from .routes import router as tasks_router
from .schemas import envelope, error_envelope

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query")]
    msg = str(first.get("msg", "Invalid request"))
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def create_app(*, store: TaskRepo | None = None, settings: Any = None) -> FastAPI:
    if settings is None:
        settings = get_settings()
    if store is None:
        store = TaskStore(settings.db_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Task API ready (db=%s)", getattr(store, "db_path", "?"))
        yield
        close = getattr(store, "close", None)
        if callable(close):
            close()
        logger.info("Task API stopped.")

    app = FastAPI(title="Task Tracker API", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(getattr(settings, "cors_origins", ["*"]) or ["*"]),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_envelope(message))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_envelope("Internal server error"),
        )

    @app.get("/")
    def root() -> dict[str, Any]:
        return {"message": "Task Tracker API is running!"}

    @app.get("/api/health")
    def health() -> Any:
        try:
            count = app.state.store.count_tasks()
        except Exception:
            logger.exception("Database health check failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_envelope("Database connection failed"),
            )
        return envelope({"taskCount": count})

    app.include_router(tasks_router)
    return app
