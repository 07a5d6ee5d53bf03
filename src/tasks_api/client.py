"""HTTP client for the task API.

The client sends the caller's identity in the same trusted header the
gateway would set and turns non-2xx responses into ``TaskApiError`` carrying
the server's message.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .settings import DEFAULT_USER_ID_HEADER

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


class TaskApiError(Exception):
    """
    Raised when a task API call fails.

    status_code is None when no response arrived (connection refused,
    timeout, other transport failures).
    """

    def __init__(self, status_code: Optional[int], message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str):
            return message
    return response.reason_phrase


class TaskApiClient:
    """Synchronous client for the /api/tasks endpoints."""

    def __init__(
        self,
        user_id: str,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
        user_id_header: str = DEFAULT_USER_ID_HEADER,
    ):
        self.user_id = user_id
        self.user_id_header = user_id_header
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._http.request(
                method,
                path,
                json=json,
                headers={self.user_id_header: self.user_id},
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s got no response: %s", method, path, e)
            raise TaskApiError(None, str(e)) from e
        if response.is_error:
            message = _error_message(response)
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise TaskApiError(response.status_code, message)
        return response.json()

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", TASKS_PATH)

    def create_task(self, title: str) -> Dict[str, Any]:
        return self._request("POST", TASKS_PATH, json={"title": title})

    def update_task(
        self,
        task_id: str,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Send only the fields that are not None."""
        payload: Dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if completed is not None:
            payload["completed"] = completed
        return self._request("PUT", f"{TASKS_PATH}/{task_id}", json=payload)

    def delete_task(self, task_id: str) -> str:
        return self._request("DELETE", f"{TASKS_PATH}/{task_id}")["message"]

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
