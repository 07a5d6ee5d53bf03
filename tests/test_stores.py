import sqlite3

import pytest

from tasks_api.db import SQLiteRepository
from tasks_api.errors import StoreError
from tasks_api.mongo import MongoRepository
from tasks_api.repositories import InMemoryRepository, build_repository
from tasks_api.settings import load_settings

from .conftest import ALICE, BOB
from .fakes import FakeCollection, UnreachableCollection


@pytest.fixture(params=["memory", "sqlite", "mongo"])
def store(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteRepository(str(tmp_path / "tasks.db"))
    if request.param == "mongo":
        return MongoRepository(FakeCollection())
    return InMemoryRepository()


class TestRepositoryContract:
    def test_create_and_get(self, store):
        task = store.create(ALICE, "Buy milk")
        assert task["title"] == "Buy milk"
        assert task["completed"] is False
        assert task["owner_id"] == ALICE
        assert isinstance(task["id"], str)
        assert store.get(task["id"]) == task

    def test_get_unknown_and_malformed_ids(self, store):
        assert store.get("12345") is None
        assert store.get("not-an-id") is None
        assert store.get("0123456789abcdef01234567") is None

    def test_list_for_owner_newest_first(self, store):
        ids = [store.create(ALICE, f"task {i}")["id"] for i in range(4)]
        store.create(BOB, "not yours")

        listed = store.list_for_owner(ALICE)
        assert [t["id"] for t in listed] == list(reversed(ids))
        assert store.list_for_owner("nobody") == []

    def test_update_applies_only_given_changes(self, store):
        task = store.create(ALICE, "Old")
        updated = store.update(task["id"], {"completed": True})
        assert updated["completed"] is True
        assert updated["title"] == "Old"
        assert updated["owner_id"] == ALICE
        assert updated["created_at"] == task["created_at"]
        assert updated["updated_at"] >= task["updated_at"]

        renamed = store.update(task["id"], {"title": "New"})
        assert renamed["title"] == "New"
        assert renamed["completed"] is True
        assert store.get(task["id"]) == renamed

    def test_update_unknown(self, store):
        assert store.update("999", {"completed": True}) is None
        assert store.update("garbage", {"completed": True}) is None

    def test_delete(self, store):
        task = store.create(ALICE, "Bye")
        assert store.delete(task["id"]) is True
        assert store.get(task["id"]) is None
        assert store.delete(task["id"]) is False
        assert store.delete("garbage") is False


class TestSQLite:
    def test_data_survives_reopen(self, tmp_path):
        path = str(tmp_path / "nested" / "tasks.db")
        task = SQLiteRepository(path).create(ALICE, "Persist me")
        reopened = SQLiteRepository(path)
        assert reopened.get(task["id"]) == task

    def test_unopenable_database_raises_store_error(self, tmp_path):
        # A directory cannot be opened as a database file
        with pytest.raises(StoreError):
            SQLiteRepository(str(tmp_path))

    def test_missing_table_raises_store_error(self, tmp_path):
        path = str(tmp_path / "tasks.db")
        repo = SQLiteRepository(path)
        task = repo.create(ALICE, "doomed")
        conn = sqlite3.connect(path)
        conn.execute("DROP TABLE tasks")
        conn.commit()
        conn.close()

        with pytest.raises(StoreError):
            repo.create(ALICE, "x")
        with pytest.raises(StoreError):
            repo.list_for_owner(ALICE)
        with pytest.raises(StoreError):
            repo.get(task["id"])
        with pytest.raises(StoreError):
            repo.delete(task["id"])

    def test_failed_update_is_rolled_back(self, tmp_path):
        path = str(tmp_path / "tasks.db")
        repo = SQLiteRepository(path)
        task = repo.create(ALICE, "frozen")
        conn = sqlite3.connect(path)
        conn.execute(
            "CREATE TRIGGER no_updates BEFORE UPDATE ON tasks "
            "BEGIN SELECT RAISE(ABORT, 'read only'); END"
        )
        conn.commit()
        conn.close()

        with pytest.raises(StoreError):
            repo.update(task["id"], {"title": "thawed", "completed": True})
        assert repo.get(task["id"]) == task

    def test_timestamps_are_utc_aware(self, tmp_path):
        task = SQLiteRepository(str(tmp_path / "tasks.db")).create(ALICE, "tz")
        assert task["created_at"].utcoffset() is not None


class TestMongo:
    def test_index_created_on_owner_and_created_at(self):
        collection = FakeCollection()
        MongoRepository(collection)
        assert collection.indexes == [[("owner_id", 1), ("created_at", -1)]]

    def test_documents_use_object_ids(self):
        collection = FakeCollection()
        task = MongoRepository(collection).create(ALICE, "doc")
        assert len(task["id"]) == 24
        (stored,) = collection.docs.values()
        assert stored["owner_id"] == ALICE
        assert stored["completed"] is False

    def test_driver_errors_become_store_errors(self):
        repo = MongoRepository(UnreachableCollection())
        with pytest.raises(StoreError):
            repo.create(ALICE, "x")
        with pytest.raises(StoreError):
            repo.list_for_owner(ALICE)
        with pytest.raises(StoreError):
            repo.get("0123456789abcdef01234567")
        with pytest.raises(StoreError):
            repo.update("0123456789abcdef01234567", {"completed": True})
        with pytest.raises(StoreError):
            repo.delete("0123456789abcdef01234567")


class TestBuildRepository:
    def test_memory_is_default(self, monkeypatch):
        monkeypatch.delenv("PERSISTENCE_BACKEND", raising=False)
        assert isinstance(build_repository(load_settings()), InMemoryRepository)

    def test_unknown_backend_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "cassandra")
        assert isinstance(build_repository(load_settings()), InMemoryRepository)

    def test_sqlite_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "sqlite")
        monkeypatch.setenv("SQLITE_DB_PATH", str(tmp_path / "t.db"))
        assert isinstance(build_repository(load_settings()), SQLiteRepository)
