from __future__ import annotations

import logging
from typing import List, Optional

from .access import Forbidden, check_owner
from .errors import ForbiddenError, NotFoundError, ValidationError
from .models import TaskChanges, TaskEntity
from .repositories import Repository
from .schemas import TaskUpdate

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "Task deleted successfully"


def normalize_title(title: Optional[str], message: str) -> str:
    """Trim a title, raising ValidationError when nothing is left."""
    stripped = (title or "").strip()
    if not stripped:
        raise ValidationError(message)
    return stripped


# PUBLIC_INTERFACE
class TaskService:
    """
    Task operations scoped to the calling owner.

    Update and delete check, in order: the task exists, the caller owns it,
    and (for update) the supplied fields are valid. Nothing is written unless
    every check passes.
    """

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def _owned_task(self, owner_id: str, task_id: str, action: str) -> TaskEntity:
        task = self.repo.get(task_id)
        if task is None:
            raise NotFoundError()
        decision = check_owner(task, owner_id)
        if isinstance(decision, Forbidden):
            logger.warning("Denied %s: %s", action, decision.reason)
            raise ForbiddenError(f"Not authorized to {action} this task")
        return task

    def create(self, owner_id: str, title: Optional[str]) -> TaskEntity:
        clean = normalize_title(title, "Task title is required")
        task = self.repo.create(owner_id, clean)
        logger.info("Created task %s for %s", task["id"], owner_id)
        return task

    def list(self, owner_id: str) -> List[TaskEntity]:
        return self.repo.list_for_owner(owner_id)

    def update(self, owner_id: str, task_id: str, data: TaskUpdate) -> TaskEntity:
        current = self._owned_task(owner_id, task_id, "update")

        changes: TaskChanges = {}
        supplied = data.model_fields_set
        if "title" in supplied:
            changes["title"] = normalize_title(data.title, "Task title cannot be empty")
        if "completed" in supplied and data.completed is not None:
            changes["completed"] = data.completed
        if not changes:
            return current

        updated = self.repo.update(task_id, changes)
        if updated is None:
            # Deleted between the ownership check and the write.
            raise NotFoundError()
        return updated

    def delete(self, owner_id: str, task_id: str) -> str:
        self._owned_task(owner_id, task_id, "delete")
        if not self.repo.delete(task_id):
            raise NotFoundError()
        logger.info("Deleted task %s for %s", task_id, owner_id)
        return DELETED_MESSAGE
