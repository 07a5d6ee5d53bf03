from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    Storage-agnostic representation of a Task document, shared by every
    repository backend.

    Fields:
    - id: Opaque string identifier assigned by the store
    - title: Trimmed, non-empty title
    - completed: Completion flag
    - owner_id: Id of the user who created the task; never changes
    - created_at: UTC creation timestamp, drives list ordering
    - updated_at: UTC timestamp of the last write
    """

    id: str
    title: str
    completed: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class TaskChanges(TypedDict, total=False):
    """Normalized field changes handed to a repository by the service."""

    title: str
    completed: bool
