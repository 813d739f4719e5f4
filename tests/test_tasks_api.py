import pytest


@pytest.fixture()
def alice(make_user):
    return make_user("Alice")


@pytest.fixture()
def bob(make_user):
    return make_user("Bob")


@pytest.fixture()
def admin(make_user):
    return make_user("Root", role="admin")


def _create(client, headers, **fields):
    payload = {"title": "Buy milk", "status": "pending", "priority": "low"}
    payload.update(fields)
    r = client.post("/tasks", json=payload, headers=headers)
    assert r.status_code == 201, r.json()
    return r.json()["data"]["task"]


def test_tasks_require_auth(client):
    assert client.get("/tasks").status_code == 401
    assert client.post("/tasks", json={"title": "x"}).status_code == 401


def test_create_ignores_supplied_owner(client, alice, bob, auth_headers):
    task = _create(client, auth_headers(alice), owner_id=bob.id, owner=bob.id)

    assert task["owner_id"] == alice.id
    assert task["owner"] == {"id": alice.id, "name": "Alice", "email": "alice@example.com"}

    r = client.get(f"/tasks/{task['id']}", headers=auth_headers(alice))
    assert r.json()["data"]["task"]["owner_id"] == alice.id


def test_create_validation(client, alice, auth_headers):
    r = client.post("/tasks", json={"title": "", "priority": "whenever"}, headers=auth_headers(alice))
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert {"title", "priority"} <= fields


def test_other_user_gets_403_admin_gets_200(client, alice, bob, admin, auth_headers):
    task = _create(client, auth_headers(alice))

    r = client.get(f"/tasks/{task['id']}", headers=auth_headers(bob))
    assert r.status_code == 403
    assert r.json() == {"success": False, "message": "You do not have access to this task", "errors": []}

    r = client.get(f"/tasks/{task['id']}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["task"]["title"] == "Buy milk"


def test_other_user_cannot_update_or_delete(client, alice, bob, auth_headers):
    task = _create(client, auth_headers(alice))

    r = client.put(f"/tasks/{task['id']}", json={"title": "mine now"}, headers=auth_headers(bob))
    assert r.status_code == 403
    assert r.json()["message"] == "You can only update your own tasks"

    r = client.delete(f"/tasks/{task['id']}", headers=auth_headers(bob))
    assert r.status_code == 403
    assert r.json()["message"] == "You can only delete your own tasks"


def test_missing_task_is_404(client, alice, auth_headers):
    r = client.get("/tasks/999", headers=auth_headers(alice))
    assert r.status_code == 404
    assert r.json()["message"] == "Task not found"


def test_list_is_scoped_and_filterable(client, alice, bob, admin, auth_headers):
    _create(client, auth_headers(alice), title="a-low", priority="low")
    _create(client, auth_headers(alice), title="a-high", priority="high", status="completed")
    _create(client, auth_headers(bob), title="b-low")

    r = client.get("/tasks", headers=auth_headers(alice))
    data = r.json()["data"]
    assert data["count"] == 2
    assert {t["title"] for t in data["tasks"]} == {"a-low", "a-high"}

    r = client.get("/tasks", params={"status": "completed"}, headers=auth_headers(alice))
    assert [t["title"] for t in r.json()["data"]["tasks"]] == ["a-high"]

    r = client.get("/tasks", headers=auth_headers(admin))
    assert r.json()["data"]["count"] == 3


def test_update_and_delete_own_task(client, alice, bob, auth_headers):
    headers = auth_headers(alice)
    task = _create(client, headers)

    r = client.put(
        f"/tasks/{task['id']}",
        json={"status": "in-progress", "owner_id": bob.id, "due_date": "2030-01-01T00:00:00"},
        headers=headers,
    )
    assert r.status_code == 200
    updated = r.json()["data"]["task"]
    assert updated["status"] == "in-progress"
    assert updated["owner_id"] == alice.id
    assert updated["due_date"].startswith("2030-01-01")

    r = client.delete(f"/tasks/{task['id']}", headers=headers)
    assert r.status_code == 200
    assert client.get(f"/tasks/{task['id']}", headers=headers).status_code == 404


def test_assign_task_to_another_user(client, alice, bob, auth_headers):
    task = _create(client, auth_headers(alice), assigned_to=bob.id)
    assert task["assignee"]["id"] == bob.id

    # Assignment does not grant the assignee access
    r = client.get(f"/tasks/{task['id']}", headers=auth_headers(bob))
    assert r.status_code == 403


def test_stats(client, alice, bob, auth_headers):
    _create(client, auth_headers(alice), status="pending", priority="low")
    _create(client, auth_headers(alice), status="completed", priority="urgent")
    _create(client, auth_headers(bob), status="cancelled")

    r = client.get("/tasks/stats", headers=auth_headers(alice))
    assert r.status_code == 200
    stats = r.json()["data"]["stats"]
    assert stats["by_status"] == {"pending": 1, "in-progress": 0, "completed": 1, "cancelled": 0}
    assert stats["by_priority"]["urgent"] == 1
    assert stats["by_priority"]["medium"] == 0

    again = client.get("/tasks/stats", headers=auth_headers(alice)).json()["data"]["stats"]
    assert again == stats


def test_update_with_blank_title_is_rejected(client, alice, auth_headers):
    headers = auth_headers(alice)
    task = _create(client, headers)

    r = client.put(f"/tasks/{task['id']}", json={"title": "   "}, headers=headers)
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"title"}

    r = client.get(f"/tasks/{task['id']}", headers=headers)
    assert r.json()["data"]["task"]["title"] == "Buy milk"
