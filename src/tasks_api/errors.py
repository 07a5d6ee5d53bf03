"""
Error taxonomy raised by the task service and store backends.

Each error carries the HTTP status it maps to; the API layer turns any
TaskServiceError into a JSON body of the form
``{"error": "<ClassName>", "message": "<text>"}``.
"""
from __future__ import annotations

from typing import Optional


class TaskServiceError(Exception):
    """Base class for all task service failures."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskServiceError):
    """Bad input from the caller."""

    status_code = 400
    default_message = "Invalid request"


class ForbiddenError(TaskServiceError):
    """The caller does not own the task."""

    status_code = 403
    default_message = "Not authorized to access this task"


class NotFoundError(TaskServiceError):
    status_code = 404
    default_message = "Task not found"


class StoreError(TaskServiceError):
    """Persistence or infrastructure failure."""

    status_code = 500
    default_message = "Task store unavailable"
