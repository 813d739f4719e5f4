import pytest
from pydantic import ValidationError as PydanticValidationError

from todoapp.models import Task
from todoapp.schemas import TaskCreate, TaskFilters, TaskUpdate
from todoapp.services.task_service import TaskService
from todoapp.utils.errors import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture()
def users(make_user):
    return {
        "alice": make_user("Alice"),
        "bob": make_user("Bob"),
        "admin": make_user("Root", role="admin"),
    }


def test_create_stamps_owner_and_ignores_supplied_owner(db, users):
    bob = users["bob"]
    payload = TaskCreate.model_validate({"title": "Buy milk", "owner_id": bob.id, "owner": bob.id})

    task = TaskService(db).create(payload, users["alice"].id)

    fetched = TaskService(db).get_by_id(task.id, users["alice"].id, "user")
    assert fetched.owner_id == users["alice"].id
    assert fetched.status == "pending"
    assert fetched.priority == "medium"


def test_create_rejects_unknown_assignee(db, users):
    with pytest.raises(ValidationError):
        TaskService(db).create(TaskCreate(title="x", assigned_to=9999), users["alice"].id)


def test_list_scoped_to_owner_for_users(db, users, make_task):
    make_task(users["alice"], title="a1")
    make_task(users["alice"], title="a2", status="completed")
    make_task(users["bob"], title="b1")

    service = TaskService(db)
    titles = {t.title for t in service.list(users["alice"].id, "user")}
    assert titles == {"a1", "a2"}

    assert len(service.list(users["admin"].id, "admin")) == 3


def test_list_filters_are_anded(db, users, make_task):
    make_task(users["alice"], title="a1", status="pending", priority="high")
    make_task(users["alice"], title="a2", status="pending", priority="low")
    make_task(users["alice"], title="a3", status="completed", priority="high")

    tasks = TaskService(db).list(users["alice"].id, "user", TaskFilters(status="pending", priority="high"))
    assert [t.title for t in tasks] == ["a1"]


def test_get_missing_task_is_not_found(db, users):
    with pytest.raises(NotFoundError):
        TaskService(db).get_by_id(12345, users["alice"].id, "user")


def test_non_owner_cannot_read_update_or_delete(db, users, make_task):
    task = make_task(users["alice"])
    service = TaskService(db)
    bob = users["bob"]

    with pytest.raises(AuthorizationError):
        service.get_by_id(task.id, bob.id, "user")
    with pytest.raises(AuthorizationError):
        service.update(task.id, TaskUpdate(title="hijacked"), bob.id, "user")
    with pytest.raises(AuthorizationError):
        service.delete(task.id, bob.id, "user")

    db.expire_all()
    assert db.get(Task, task.id).title == "Buy milk"


def test_update_applies_patch_but_never_owner(db, users, make_task):
    task = make_task(users["alice"])
    patch = TaskUpdate.model_validate({"status": "in-progress", "owner_id": users["bob"].id})

    updated = TaskService(db).update(task.id, patch, users["alice"].id, "user")

    assert updated.status == "in-progress"
    assert updated.owner_id == users["alice"].id
    assert updated.title == "Buy milk"


def test_admin_can_update_and_delete_any_task(db, users, make_task):
    task = make_task(users["alice"])
    service = TaskService(db)

    updated = service.update(task.id, TaskUpdate(priority="urgent"), users["admin"].id, "admin")
    assert updated.priority == "urgent"
    assert updated.owner_id == users["alice"].id

    service.delete(task.id, users["admin"].id, "admin")
    with pytest.raises(NotFoundError):
        service.get_by_id(task.id, users["admin"].id, "admin")


def test_stats_reports_every_category(db, users, make_task):
    make_task(users["alice"], status="pending", priority="low")
    make_task(users["alice"], status="completed", priority="low")
    make_task(users["bob"], status="cancelled", priority="urgent")

    service = TaskService(db)
    stats = service.stats(users["alice"].id, "user")

    assert stats["by_status"] == {"pending": 1, "in-progress": 0, "completed": 1, "cancelled": 0}
    assert stats["by_priority"] == {"low": 2, "medium": 0, "high": 0, "urgent": 0}

    # No writes in between, same answer
    assert service.stats(users["alice"].id, "user") == stats

    admin_stats = service.stats(users["admin"].id, "admin")
    assert sum(admin_stats["by_status"].values()) == 3
    assert admin_stats["by_priority"]["urgent"] == 1


def test_stats_for_user_without_tasks_is_all_zero(db, users):
    stats = TaskService(db).stats(users["bob"].id, "user")
    assert set(stats["by_status"].values()) == {0}
    assert set(stats["by_priority"].values()) == {0}


def test_update_rejects_blank_title(db, users, make_task):
    task = make_task(users["alice"])

    with pytest.raises(PydanticValidationError):
        TaskUpdate(title="   ")

    updated = TaskService(db).update(task.id, TaskUpdate(title="  Buy oat milk  "), users["alice"].id, "user")
    assert updated.title == "Buy oat milk"
