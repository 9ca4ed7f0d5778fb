import pytest
from conftest import auth

from app.models.task import Task


@pytest.mark.asyncio
async def test_requests_without_identity_are_rejected(client):
    r = await client.get("/tasks")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user_gets_404(client):
    r = await client.get("/tasks", headers={"X-User-Id": "999"})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_manager_creates_task_for_member(client, store):
    pm = await store.manager()
    dev = await store.member()

    r = await client.post(
        "/tasks",
        json={
            "title": "Write API",
            "priority": "high",
            "assigned_to_user_id": dev.id,
            "due_date": "2030-01-01T12:00:00Z",
        },
        headers=auth(pm),
    )

    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "pending"
    assert body["created_by_user_id"] == pm.id
    assert body["assigned_to_user_id"] == dev.id
    assert body["is_unread"] is True
    assert body["progress_percentage"] == 0
    assert body["assignee"]["id"] == dev.id


@pytest.mark.asyncio
async def test_member_cannot_create_task(client, store):
    dev = await store.member()
    r = await client.post(
        "/tasks",
        json={"title": "x", "priority": "low", "assigned_to_user_id": dev.id},
        headers=auth(dev),
    )
    assert r.status_code == 403
    assert r.json()["detail"] == "This action is unauthorized."


@pytest.mark.asyncio
async def test_create_task_with_unknown_assignee_is_422(client, store):
    pm = await store.manager()
    r = await client.post(
        "/tasks",
        json={"title": "x", "priority": "low", "assigned_to_user_id": 4242},
        headers=auth(pm),
    )
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail[0]["loc"] == ["body", "assigned_to_user_id"]


@pytest.mark.asyncio
async def test_member_sees_only_assigned_tasks(client, store):
    pm = await store.manager()
    dev = await store.member()
    other = await store.member()
    mine = await store.task(creator=pm, assignee=dev, title="mine")
    foreign = await store.task(creator=pm, assignee=other, title="foreign")

    r = await client.get(f"/tasks/{mine.id}", headers=auth(dev))
    assert r.status_code == 200

    r = await client.get(f"/tasks/{foreign.id}", headers=auth(dev))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_missing_task_is_404(client, store):
    pm = await store.manager()
    r = await client.get("/tasks/12345", headers=auth(pm))
    assert r.status_code == 404
    assert r.json()["detail"] == "Task not found"


@pytest.mark.asyncio
async def test_member_update_only_touches_status_and_actual_time(client, store):
    pm = await store.manager()
    dev = await store.member()
    task = await store.task(creator=pm, assignee=dev, title="Original", priority="low")

    r = await client.put(
        f"/tasks/{task.id}",
        json={
            "status": "in_progress",
            "actual_time": 90,
            "title": "Hijacked",
            "priority": "urgent",
            "assigned_to_user_id": dev.id,
        },
        headers=auth(dev),
    )

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "in_progress"
    assert body["actual_time"] == 90
    assert body["title"] == "Original"
    assert body["priority"] == "low"


@pytest.mark.asyncio
async def test_member_cannot_update_foreign_task(client, store):
    pm = await store.manager()
    dev = await store.member()
    other = await store.member()
    task = await store.task(creator=pm, assignee=other)

    r = await client.put(
        f"/tasks/{task.id}", json={"status": "completed"}, headers=auth(dev)
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_invalid_status_is_422(client, store):
    pm = await store.manager()
    task = await store.task(creator=pm, assignee=pm)

    r = await client.put(f"/tasks/{task.id}", json={"status": "done"}, headers=auth(pm))
    assert r.status_code == 422
    assert r.json()["detail"][0]["loc"] == ["body", "status"]


@pytest.mark.asyncio
async def test_reassignment_resets_viewed_at(client, store):
    pm = await store.manager()
    dev = await store.member()
    other = await store.member()
    task = await store.task(creator=pm, assignee=dev)

    # dev открыл список -- задача прочитана
    await client.get("/tasks", headers=auth(dev))
    assert (await store.get(Task, task.id)).viewed_at is not None

    r = await client.put(
        f"/tasks/{task.id}", json={"assigned_to_user_id": other.id}, headers=auth(pm)
    )
    assert r.status_code == 200
    assert r.json()["assigned_to_user_id"] == other.id
    assert r.json()["is_unread"] is True


@pytest.mark.asyncio
async def test_only_creating_manager_can_delete(client, store):
    creator = await store.manager()
    other_pm = await store.manager()
    dev = await store.member()
    task = await store.task(creator=creator, assignee=dev)

    r = await client.delete(f"/tasks/{task.id}", headers=auth(dev))
    assert r.status_code == 403

    r = await client.delete(f"/tasks/{task.id}", headers=auth(other_pm))
    assert r.status_code == 403

    r = await client.delete(f"/tasks/{task.id}", headers=auth(creator))
    assert r.status_code == 200

    # удаление мягкое: строка остаётся, но задача больше не находится
    assert (await store.get(Task, task.id)).deleted_at is not None
    r = await client.get(f"/tasks/{task.id}", headers=auth(creator))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_listing_marks_member_tasks_read(client, store):
    pm = await store.manager()
    dev = await store.member()
    await store.task(creator=pm, assignee=dev, title="a")
    await store.task(creator=pm, assignee=dev, title="b")

    r = await client.get("/tasks/unread-count", headers=auth(dev))
    assert r.json() == {"count": 2}

    r = await client.get("/tasks", headers=auth(dev))
    assert r.status_code == 200
    body = r.json()
    assert body["kind"] == "flat"
    # ответ собран до отметки
    assert all(t["is_unread"] for t in body["items"])

    r = await client.get("/tasks/unread-count", headers=auth(dev))
    assert r.json() == {"count": 0}

    # повторный вызов ничего не меняет
    r = await client.get("/tasks", headers=auth(dev))
    assert not any(t["is_unread"] for t in r.json()["items"])
    r = await client.get("/tasks/unread-count", headers=auth(dev))
    assert r.json() == {"count": 0}


@pytest.mark.asyncio
async def test_manager_listing_does_not_mark_anything_read(client, store):
    pm = await store.manager()
    dev = await store.member()
    task = await store.task(creator=pm, assignee=dev)

    await client.get("/tasks", headers=auth(pm))

    assert (await store.get(Task, task.id)).viewed_at is None
    r = await client.get("/tasks/unread-count", headers=auth(pm))
    assert r.json() == {"count": 0}


@pytest.mark.asyncio
async def test_progress_follows_subtasks(client, store):
    pm = await store.manager()
    task = await store.task(creator=pm, assignee=pm)
    await store.subtask(task, status="completed", order=0)
    for i in range(1, 4):
        await store.subtask(task, order=i)

    r = await client.get(f"/tasks/{task.id}", headers=auth(pm))
    body = r.json()
    assert body["progress_percentage"] == 25
    assert [s["order"] for s in body["subtasks"]] == [0, 1, 2, 3]
