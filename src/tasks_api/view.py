"""
Client-side task list state.

The server is the source of truth: every successful mutation is followed by
a full re-fetch, never a local patch. Filtering is purely local.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .client import TaskApiClient, TaskApiError

logger = logging.getLogger(__name__)

EMPTY_TITLE_MESSAGE = "Task title cannot be empty"
FETCH_FAILED = "Failed to fetch tasks"
ADD_FAILED = "Failed to add task"
UPDATE_FAILED = "Failed to update task"
DELETE_FAILED = "Failed to delete task"


class StatusFilter(str, Enum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int


class TaskListView:
    """In-memory copy of the caller's task list plus search/status filters."""

    def __init__(self, client: TaskApiClient) -> None:
        self.client = client
        self.tasks: List[Dict[str, Any]] = []
        self.search: str = ""
        self.status_filter: StatusFilter = StatusFilter.ALL
        self.error: str = ""

    def set_status_filter(self, value: str) -> None:
        self.status_filter = StatusFilter(value)

    @property
    def visible(self) -> List[Dict[str, Any]]:
        """Tasks matching the search text (case-insensitive) and the status filter."""
        items = self.tasks
        if self.search:
            needle = self.search.lower()
            items = [t for t in items if needle in t["title"].lower()]
        if self.status_filter is StatusFilter.COMPLETED:
            items = [t for t in items if t["completed"]]
        elif self.status_filter is StatusFilter.PENDING:
            items = [t for t in items if not t["completed"]]
        return items

    @property
    def stats(self) -> TaskStats:
        done = sum(1 for t in self.tasks if t["completed"])
        return TaskStats(total=len(self.tasks), completed=done, pending=len(self.tasks) - done)

    def _fail(self, exc: TaskApiError, fallback: str) -> bool:
        logger.info("Task API call failed: %s", exc)
        # Without a server response there is no server message to show.
        self.error = exc.message if exc.status_code is not None and exc.message else fallback
        return False

    def refresh(self) -> bool:
        try:
            self.tasks = self.client.list_tasks()
        except TaskApiError as exc:
            return self._fail(exc, FETCH_FAILED)
        self.error = ""
        return True

    def _mutate_then_refresh(self, fallback: str, call, *args, **kwargs) -> bool:
        try:
            call(*args, **kwargs)
        except TaskApiError as exc:
            return self._fail(exc, fallback)
        return self.refresh()

    def add(self, title: str) -> bool:
        if not title.strip():
            self.error = EMPTY_TITLE_MESSAGE
            return False
        return self._mutate_then_refresh(ADD_FAILED, self.client.create_task, title.strip())

    def toggle(self, task: Dict[str, Any]) -> bool:
        return self._mutate_then_refresh(
            UPDATE_FAILED, self.client.update_task, task["id"], completed=not task["completed"]
        )

    def rename(self, task_id: str, title: str) -> bool:
        if not title.strip():
            self.error = EMPTY_TITLE_MESSAGE
            return False
        return self._mutate_then_refresh(
            UPDATE_FAILED, self.client.update_task, task_id, title=title.strip()
        )

    def remove(self, task_id: str) -> bool:
        return self._mutate_then_refresh(DELETE_FAILED, self.client.delete_task, task_id)

    def find(self, task_id: str) -> Optional[Dict[str, Any]]:
        return next((t for t in self.tasks if t["id"] == task_id), None)
