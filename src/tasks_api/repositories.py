from __future__ import annotations

import itertools
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List, Optional, Tuple

from .models import TaskChanges, TaskEntity
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def create(self, owner_id: str, title: str) -> TaskEntity:
        """Persist a new, not yet completed task and return it."""

    @abstractmethod
    def get(self, task_id: str) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def update(self, task_id: str, changes: TaskChanges) -> Optional[TaskEntity]:
        """Apply changes to an existing task. Return the updated entity or None if not found."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list_for_owner(self, owner_id: str) -> List[TaskEntity]:
        """Return every task owned by owner_id, newest created_at first."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, TaskEntity] = {}
        # Insertion order breaks created_at ties so "newest first" stays stable.
        self._seq: Dict[str, int] = {}
        self._counter = itertools.count()

    def create(self, owner_id: str, title: str) -> TaskEntity:
        now = utcnow()
        entity: TaskEntity = {
            "id": uuid.uuid4().hex,
            "title": title,
            "completed": False,
            "owner_id": owner_id,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
            self._seq[entity["id"]] = next(self._counter)
        return entity.copy()

    def get(self, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def update(self, task_id: str, changes: TaskChanges) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None

            updated = existing.copy()
            if "title" in changes:
                updated["title"] = changes["title"]
            if "completed" in changes:
                updated["completed"] = changes["completed"]
            updated["updated_at"] = utcnow()

            self._items[task_id] = updated
            return updated.copy()

    def delete(self, task_id: str) -> bool:
        with self._lock:
            self._seq.pop(task_id, None)
            return self._items.pop(task_id, None) is not None

    def list_for_owner(self, owner_id: str) -> List[TaskEntity]:
        with self._lock:
            owned = [t for t in self._items.values() if t["owner_id"] == owner_id]

            def sort_key(t: TaskEntity) -> Tuple[datetime, int]:
                return t["created_at"], self._seq[t["id"]]

            # Return copies to avoid external mutation
            return [t.copy() for t in sorted(owned, key=sort_key, reverse=True)]


def build_repository(settings: Settings) -> Repository:
    """
    Build the repository selected by settings.persistence_backend.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (standard library sqlite3)
    - mongo: MongoRepository (pymongo)
    """
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using sqlite task store at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    if settings.persistence_backend == "mongo":
        from .mongo import MongoRepository

        logger.info("Using mongo task store, database %s", settings.mongo_db_name)
        return MongoRepository.from_uri(settings.mongo_uri, settings.mongo_db_name)
    logger.info("Using in-memory task store")
    return InMemoryRepository()


_repository: Optional[Repository] = None
_repository_lock = RLock()


# PUBLIC_INTERFACE
def get_repository() -> Repository:
    """
    Return the process-wide repository, building it from settings on first use.
    """
    global _repository
    with _repository_lock:
        if _repository is None:
            _repository = build_repository(get_settings())
        return _repository
