"""
Ownership guard evaluated before any task mutation.

The guard returns a tagged decision instead of raising so callers decide how
to report a denial; the service turns ``Forbidden`` into ``ForbiddenError``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .models import TaskEntity


@dataclass(frozen=True)
class Allowed:
    pass


@dataclass(frozen=True)
class Forbidden:
    reason: str


AccessDecision = Union[Allowed, Forbidden]


# PUBLIC_INTERFACE
def check_owner(task: TaskEntity, user_id: str) -> AccessDecision:
    """Allow access only when the caller is the task's owner."""
    if task["owner_id"] == user_id:
        return Allowed()
    return Forbidden(reason=f"user {user_id!r} does not own task {task['id']!r}")
