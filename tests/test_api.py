# tests/test_api.py

from datetime import timedelta

import pytest

from conftest import day, minute
from taskboard.utils.clock import utcnow

API = "/api/v1"


async def _register_and_login(client, name: str, email: str, password: str = "password123") -> dict:
    response = await client.post(
        f"{API}/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text

    response = await client.post(
        f"{API}/auth/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    # tests authenticate with the bearer header only
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
async def alice(client):
    return await _register_and_login(client, "Alice", "alice@example.com")


@pytest.fixture()
async def bob(client):
    return await _register_and_login(client, "Bob", "bob@example.com")


async def _create_project(client, headers, title="Launch") -> int:
    response = await client.post(f"{API}/projects", json={"title": title}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def _create_task(client, headers, project_id, **extra) -> dict:
    body = {"description": "write docs", "reward": 10, "project_id": project_id, "title": "Docs"}
    body.update(extra)
    return await client.post(f"{API}/tasks", json=body, headers=headers)


async def test_health_check(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


async def test_login_returns_token_and_sets_cookie(client):
    await client.post(
        f"{API}/auth/register",
        json={"name": "Carol", "email": "carol@example.com", "password": "password123"},
    )
    response = await client.post(
        f"{API}/auth/login",
        json={"email": "carol@example.com", "password": "password123"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "carol@example.com"
    assert "auth_token" in response.headers.get("set-cookie", "")


async def test_login_with_wrong_password(client, alice):
    response = await client.post(
        f"{API}/auth/login",
        json={"email": "alice@example.com", "password": "not-the-password"},
    )
    assert response.status_code == 401
    assert response.json()["error"] == "InvalidCredentials"


async def test_register_twice_is_conflict(client, alice):
    response = await client.post(
        f"{API}/auth/register",
        json={"name": "Alice again", "email": "alice@example.com", "password": "password123"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"


async def test_me(client, alice):
    response = await client.get(f"{API}/auth/me", headers=alice)
    assert response.status_code == 200
    assert response.json()["name"] == "Alice"


async def test_requests_without_token_are_rejected(client):
    client.cookies.clear()
    assert (await client.get(f"{API}/tasks")).status_code == 401
    response = await client.get(f"{API}/tasks", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


async def test_task_lifecycle(client, alice, bob):
    project_id = await _create_project(client, alice)

    response = await _create_task(client, alice, project_id, due_date=day(10))
    assert response.status_code == 201, response.text
    task = response.json()
    assert task["progress"] == "ToDo"
    assert task["priority"] == "Medium"
    assert task["completed"] is False

    bob_id = (await client.get(f"{API}/auth/me", headers=bob)).json()["id"]
    response = await client.patch(
        f"{API}/tasks/{task['id']}",
        json={"progress": "InProgress", "assigned_users": [bob_id]},
        headers=alice,
    )
    assert response.status_code == 200, response.text
    assert response.json()["task"]["progress"] == "InProgress"
    assert response.json()["assigned_users"] == [bob_id]

    response = await client.get(f"{API}/tasks/{task['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json()["subtasks"] == []

    response = await client.delete(f"{API}/tasks/{task['id']}", headers=alice)
    assert response.status_code == 200
    assert (await client.get(f"{API}/tasks", headers=alice)).json() == []


async def test_task_in_unknown_project_is_conflict(client, alice):
    response = await _create_task(client, alice, 9999)
    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"


async def test_task_with_past_due_date_is_bad_request(client, alice):
    project_id = await _create_project(client, alice)
    response = await _create_task(client, alice, project_id, due_date=day(-1))

    assert response.status_code == 400
    assert response.json()["error"] == "PastDueDate"


async def test_task_errors_carry_their_kind(client, alice, bob):
    project_id = await _create_project(client, alice)
    task_id = (await _create_task(client, alice, project_id)).json()["id"]

    response = await client.patch(f"{API}/tasks/{task_id}", json={"title": "mine"}, headers=bob)
    assert response.status_code == 403
    assert response.json()["error"] == "PermissionDenied"

    response = await client.get(f"{API}/tasks/{task_id}", headers=bob)
    assert response.status_code == 404
    assert response.json() == {"detail": "Task not found", "error": "NotFound"}


async def test_access_grant_and_revoke(client, alice, bob):
    project_id = await _create_project(client, alice)
    task_id = (await _create_task(client, alice, project_id)).json()["id"]
    bob_id = (await client.get(f"{API}/auth/me", headers=bob)).json()["id"]

    response = await client.post(f"{API}/tasks/{task_id}/access/{bob_id}", headers=alice)
    assert response.status_code == 201
    assert response.json()["user_id"] == bob_id

    response = await client.patch(f"{API}/tasks/{task_id}", json={"reward": 50}, headers=bob)
    assert response.status_code == 200
    assert response.json()["task"]["reward"] == 50

    response = await client.delete(f"{API}/tasks/{task_id}/access/{bob_id}", headers=alice)
    assert response.status_code == 200
    response = await client.patch(f"{API}/tasks/{task_id}", json={"reward": 1}, headers=bob)
    assert response.status_code == 403


async def test_subtask_flow(client, alice):
    project_id = await _create_project(client, alice)
    task_id = (await _create_task(client, alice, project_id)).json()["id"]

    response = await client.post(
        f"{API}/subtasks",
        json={"task_id": task_id, "title": "outline", "description": "first pass", "due_date": day(3)},
        headers=alice,
    )
    assert response.status_code == 201, response.text
    sub_task_id = response.json()["id"]

    response = await client.patch(
        f"{API}/subtasks/{task_id}/{sub_task_id}",
        json={"completed": True},
        headers=alice,
    )
    assert response.status_code == 200
    assert response.json()["sub_task"]["completed"] is True

    response = await client.get(f"{API}/subtasks/{task_id}", headers=alice)
    assert [s["sub_task"]["id"] for s in response.json()] == [sub_task_id]

    response = await client.delete(f"{API}/subtasks/{task_id}/{sub_task_id}", headers=alice)
    assert response.status_code == 204


async def test_subtask_for_missing_task(client, alice):
    response = await client.post(
        f"{API}/subtasks",
        json={"task_id": 555, "title": "orphan", "description": "none"},
        headers=alice,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "TaskNotFound"


async def test_meeting_flow(client, alice, bob):
    base = utcnow()
    response = await client.post(
        f"{API}/meetings",
        json={
            "start_date": minute(timedelta(days=1), base),
            "end_date": minute(timedelta(days=1, hours=1), base),
        },
        headers=alice,
    )
    assert response.status_code == 201, response.text
    meeting = response.json()
    assert meeting["duration"] == 60

    response = await client.delete(f"{API}/meetings/{meeting['id']}", headers=bob)
    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"

    response = await client.get(f"{API}/meetings/{meeting['id']}", headers=alice)
    assert response.status_code == 200

    response = await client.delete(f"{API}/meetings/{meeting['id']}", headers=alice)
    assert response.status_code == 204
    assert (await client.get(f"{API}/meetings", headers=alice)).json() == []


@pytest.mark.parametrize("start_offset, end_offset, error", [
    (timedelta(hours=-1), timedelta(hours=2), "InvalidStartDate"),
    (timedelta(hours=2), timedelta(hours=1), "InvalidDateRange"),
])
async def test_meeting_date_errors(client, alice, start_offset, end_offset, error):
    response = await client.post(
        f"{API}/meetings",
        json={"start_date": minute(start_offset), "end_date": minute(end_offset)},
        headers=alice,
    )
    assert response.status_code == 400
    assert response.json()["error"] == error


async def test_meeting_bad_format(client, alice):
    response = await client.post(
        f"{API}/meetings",
        json={"start_date": "2099-01-01T10:00", "end_date": "01-01-2099 11:00"},
        headers=alice,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidFormat"


async def test_home_views(client, alice, bob):
    assert (await client.get(f"{API}/home/project", headers=alice)).status_code == 404

    await _create_project(client, alice, "old")
    project_id = await _create_project(client, alice, "new")
    task_id = (await _create_task(client, alice, project_id)).json()["id"]
    bob_id = (await client.get(f"{API}/auth/me", headers=bob)).json()["id"]
    await client.patch(
        f"{API}/tasks/{task_id}",
        json={"progress": "Completed", "assigned_users": [bob_id]},
        headers=alice,
    )

    response = await client.get(f"{API}/home/project", headers=alice)
    assert response.json()["title"] == "new"

    response = await client.get(f"{API}/home/mywork", params={"progress": "completed"}, headers=alice)
    assert [t["id"] for t in response.json()] == [task_id]
    response = await client.get(f"{API}/home/mywork", params={"progress": "to_do"}, headers=alice)
    assert response.json() == []

    response = await client.get(f"{API}/home/assigned", headers=bob)
    assigned = response.json()
    assert [a["task"]["id"] for a in assigned] == [task_id]
    assert [u["id"] for u in assigned[0]["assignees"]] == [bob_id]

    response = await client.get(f"{API}/home/activities", headers=alice)
    assert [t["id"] for t in response.json()] == [task_id]


async def test_unknown_progress_filter(client, alice):
    response = await client.get(f"{API}/home/mywork", params={"progress": "someday"}, headers=alice)
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidFormat"


async def test_register_and_login_with_long_password(client):
    headers = await _register_and_login(client, "Dana", "dana@example.com", password="x" * 100)

    response = await client.get(f"{API}/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "dana@example.com"
