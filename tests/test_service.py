import pytest

from tasks_api.access import Allowed, Forbidden, check_owner
from tasks_api.errors import ForbiddenError, NotFoundError, ValidationError
from tasks_api.schemas import TaskUpdate
from tasks_api.service import DELETED_MESSAGE

from .conftest import ALICE, BOB


class TestAccessGuard:
    def test_owner_is_allowed(self, repo):
        task = repo.create(ALICE, "mine")
        assert check_owner(task, ALICE) == Allowed()

    def test_stranger_is_forbidden(self, repo):
        task = repo.create(ALICE, "mine")
        decision = check_owner(task, BOB)
        assert isinstance(decision, Forbidden)
        assert BOB in decision.reason


class TestCreate:
    def test_title_is_trimmed(self, service):
        task = service.create(ALICE, "  Buy milk  ")
        assert task["title"] == "Buy milk"
        assert task["completed"] is False
        assert task["owner_id"] == ALICE
        assert task["created_at"] == task["updated_at"]

    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
    def test_blank_title_persists_nothing(self, service, repo, title):
        with pytest.raises(ValidationError):
            service.create(ALICE, title)
        assert repo.list_for_owner(ALICE) == []


class TestList:
    def test_empty(self, service):
        assert service.list(ALICE) == []

    def test_only_callers_tasks_newest_first(self, service):
        a1 = service.create(ALICE, "a1")
        service.create(BOB, "b1")
        a2 = service.create(ALICE, "a2")
        a3 = service.create(ALICE, "a3")

        tasks = service.list(ALICE)
        assert [t["id"] for t in tasks] == [a3["id"], a2["id"], a1["id"]]
        stamps = [t["created_at"] for t in tasks]
        assert stamps == sorted(stamps, reverse=True)


class TestUpdate:
    def test_only_supplied_fields_change(self, service):
        task = service.create(ALICE, "Initial")
        updated = service.update(ALICE, task["id"], TaskUpdate(completed=True))
        assert updated["completed"] is True
        assert updated["title"] == "Initial"

        renamed = service.update(ALICE, task["id"], TaskUpdate(title="  New  "))
        assert renamed["title"] == "New"
        assert renamed["completed"] is True

    def test_empty_update_returns_current_task(self, service, repo):
        task = service.create(ALICE, "Same")
        result = service.update(ALICE, task["id"], TaskUpdate())
        assert result == repo.get(task["id"])

    def test_missing_task(self, service):
        with pytest.raises(NotFoundError):
            service.update(ALICE, "missing", TaskUpdate(completed=True))

    def test_foreign_task_is_untouched(self, service, repo):
        task = service.create(ALICE, "Alice's")
        with pytest.raises(ForbiddenError):
            service.update(BOB, task["id"], TaskUpdate(title="Bob's now", completed=True))
        assert repo.get(task["id"]) == task

    def test_forbidden_checked_before_title(self, service):
        task = service.create(ALICE, "Alice's")
        with pytest.raises(ForbiddenError):
            service.update(BOB, task["id"], TaskUpdate(title="   "))

    def test_blank_title_rejected(self, service, repo):
        task = service.create(ALICE, "Keep")
        with pytest.raises(ValidationError):
            service.update(ALICE, task["id"], TaskUpdate(title="  ", completed=True))
        assert repo.get(task["id"]) == task

    def test_forbidden_attempt_is_logged(self, service, caplog):
        task = service.create(ALICE, "Alice's")
        with caplog.at_level("WARNING", logger="tasks_api.service"):
            with pytest.raises(ForbiddenError):
                service.update(BOB, task["id"], TaskUpdate(completed=True))
        assert "Denied update" in caplog.text


class TestDelete:
    def test_delete_removes_task(self, service):
        task = service.create(ALICE, "Bye")
        assert service.delete(ALICE, task["id"]) == DELETED_MESSAGE
        assert service.list(ALICE) == []
        with pytest.raises(NotFoundError):
            service.delete(ALICE, task["id"])
        with pytest.raises(NotFoundError):
            service.update(ALICE, task["id"], TaskUpdate(completed=True))

    def test_foreign_delete_forbidden(self, service):
        task = service.create(ALICE, "Stay")
        with pytest.raises(ForbiddenError):
            service.delete(BOB, task["id"])
        assert len(service.list(ALICE)) == 1


def test_end_to_end(service):
    task = service.create(ALICE, "Write spec")
    listed = service.list(ALICE)
    assert len(listed) == 1 and listed[0]["completed"] is False

    service.update(ALICE, task["id"], TaskUpdate(completed=True))
    assert service.list(ALICE)[0]["completed"] is True

    service.delete(ALICE, task["id"])
    assert service.list(ALICE) == []
