from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import StoreError
from .models import TaskChanges, TaskEntity
from .repositories import Repository, utcnow

logger = logging.getLogger(__name__)

COLLECTION_NAME = "tasks"


def to_object_id(task_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(task_id)
    except (InvalidId, TypeError):
        return None


def _doc_to_entity(doc: Dict[str, Any]) -> TaskEntity:
    return {
        "id": str(doc["_id"]),
        "title": doc["title"],
        "completed": bool(doc.get("completed", False)),
        "owner_id": doc["owner_id"],
        "created_at": doc["created_at"],
        "updated_at": doc["updated_at"],
    }


class MongoRepository(Repository):
    """
    Document-store repository backed by a single MongoDB collection.

    Every operation is a single-document command, so MongoDB's per-document
    atomicity is all the consistency this store needs.
    """

    def __init__(self, collection: Collection) -> None:
        self._tasks = collection
        try:
            self._tasks.create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
        except PyMongoError as e:
            raise StoreError(f"Could not prepare task collection: {e}") from e

    @classmethod
    def from_uri(cls, uri: str, db_name: str) -> "MongoRepository":
        client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=2000, tz_aware=True)
        return cls(client[db_name][COLLECTION_NAME])

    def create(self, owner_id: str, title: str) -> TaskEntity:
        now = utcnow()
        doc = {
            "title": title,
            "completed": False,
            "owner_id": owner_id,
            "created_at": now,
            "updated_at": now,
        }
        try:
            res = self._tasks.insert_one(doc)
        except PyMongoError as e:
            logger.error("insert_one failed: %s", e)
            raise StoreError("Error creating task") from e
        doc["_id"] = res.inserted_id
        return _doc_to_entity(doc)

    def get(self, task_id: str) -> Optional[TaskEntity]:
        oid = to_object_id(task_id)
        if oid is None:
            return None
        try:
            doc = self._tasks.find_one({"_id": oid})
        except PyMongoError as e:
            raise StoreError("Error fetching task") from e
        return None if doc is None else _doc_to_entity(doc)

    def update(self, task_id: str, changes: TaskChanges) -> Optional[TaskEntity]:
        oid = to_object_id(task_id)
        if oid is None:
            return None
        updates: Dict[str, Any] = dict(changes)
        updates["updated_at"] = utcnow()
        try:
            doc = self._tasks.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreError("Error updating task") from e
        return None if doc is None else _doc_to_entity(doc)

    def delete(self, task_id: str) -> bool:
        oid = to_object_id(task_id)
        if oid is None:
            return False
        try:
            res = self._tasks.delete_one({"_id": oid})
        except PyMongoError as e:
            raise StoreError("Error deleting task") from e
        return res.deleted_count > 0

    def list_for_owner(self, owner_id: str) -> List[TaskEntity]:
        try:
            cursor = self._tasks.find({"owner_id": owner_id}).sort(
                [("created_at", DESCENDING), ("_id", DESCENDING)]
            )
            return [_doc_to_entity(d) for d in cursor]
        except PyMongoError as e:
            raise StoreError("Error fetching tasks") from e
