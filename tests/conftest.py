# tests/conftest.py

from __future__ import annotations

import os
from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so importing the app never touches disk or network
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from tasks_api.main import app  # noqa: E402
from tasks_api.repositories import InMemoryRepository, get_repository  # noqa: E402
from tasks_api.service import TaskService  # noqa: E402

ALICE = "user-alice"
BOB = "user-bob"


def as_user(user_id: str) -> Dict[str, str]:
    return {"X-User-Id": user_id}


@pytest.fixture()
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture()
def service(repo: InMemoryRepository) -> TaskService:
    return TaskService(repo)


@pytest.fixture()
def client(repo: InMemoryRepository) -> Iterator[TestClient]:
    """
    TestClient whose requests all hit a fresh in-memory repository, so tests
    never see each other's tasks.
    """
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
