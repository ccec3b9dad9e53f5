# src/task_tracker/client/api_client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.ports import Envelope

logger = logging.getLogger(__name__)


class TaskAPIError(RuntimeError):
    """
    Transport-level failure: network error, timeout or a non-2xx response.

    `status_code` is None when no response was received. `error` carries the
    envelope's error text when the server sent one.
    """

    def __init__(self, message: str, *, status_code: int | None = None, error: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error


def _error_text(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


class TaskAPIClient:
    """
    Thin httpx wrapper: one method per REST operation, each returns the decoded envelope.

    No retries and no business logic. Either pass `base_url` (e.g.
    "http://localhost:5000/api") or an existing httpx.Client whose base_url
    already points at the service root; only a client created here is closed
    by close().
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
        prefix: str = "",
    ) -> None:
        if http is None and not base_url:
            raise ValueError("base_url or http client is required")
        self._owns_http = http is None
        self._http = http or httpx.Client(
            base_url=str(base_url).rstrip("/"),
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )
        self._prefix = prefix.rstrip("/")

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> TaskAPIClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, what: str, json: dict[str, Any] | None = None) -> Envelope:
        url = f"{self._prefix}{path}"
        try:
            response = self._http.request(method, url, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error("Error %s: HTTP %s", what, status_code)
            raise TaskAPIError(
                f"Error {what}: HTTP {status_code}",
                status_code=status_code,
                error=_error_text(e.response),
            ) from e
        except httpx.HTTPError as e:
            logger.error("Error %s: %s", what, e.__class__.__name__)
            raise TaskAPIError(f"Error {what}: {e.__class__.__name__}") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error("Error %s: response is not JSON", what)
            raise TaskAPIError(f"Error {what}: invalid JSON", status_code=response.status_code) from e
        if not isinstance(body, dict):
            raise TaskAPIError(f"Error {what}: unexpected body", status_code=response.status_code)
        return body

    # ---- operations ----

    def get_all_tasks(self) -> Envelope:
        return self._request("GET", "/tasks", "getting tasks")

    def get_task(self, task_id: int) -> Envelope:
        return self._request("GET", f"/tasks/{int(task_id)}", "getting task")

    def create_task(self, data: dict[str, Any]) -> Envelope:
        return self._request("POST", "/tasks", "creating task", json=data)

    def update_task(self, task_id: int, data: dict[str, Any]) -> Envelope:
        return self._request("PUT", f"/tasks/{int(task_id)}", "updating task", json=data)

    def delete_task(self, task_id: int) -> Envelope:
        return self._request("DELETE", f"/tasks/{int(task_id)}", "deleting task")
