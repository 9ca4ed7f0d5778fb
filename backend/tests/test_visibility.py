import pytest
from conftest import auth

from app.models.enums import Role
from app.policies.actor import Actor, standing_for
from app.services.visibility import (
    DEFAULT_SORT_BY,
    DEFAULT_SORT_ORDER,
    TaskFilters,
    build_query_spec,
)


def _actor(role: Role, id: int = 1) -> Actor:
    return Actor(id=id, standing=standing_for(role.value), team_id=1)


def test_manager_gets_two_partitions():
    spec = build_query_spec(_actor(Role.project_manager))
    assert spec.kind == "partitioned"
    assert [p.name for p in spec.partitions] == ["mine", "team"]


def test_member_gets_flat_list_and_loses_assignee_filter():
    spec = build_query_spec(
        _actor(Role.system_analyst), TaskFilters(assigned_to=7, status="pending")
    )
    assert spec.kind == "flat"
    assert [p.name for p in spec.partitions] == ["items"]
    assert spec.filters.assigned_to is None
    assert spec.filters.status == "pending"


@pytest.mark.parametrize(
    "sort_by,sort_order",
    [("password", "asc"), ("title; drop table tasks", "desc"), ("title", "sideways")],
)
def test_unknown_sort_falls_back(sort_by, sort_order):
    filters = TaskFilters(sort_by=sort_by, sort_order=sort_order).normalized()
    if sort_by == "title":
        assert filters.sort_by == "title"
    else:
        assert filters.sort_by == DEFAULT_SORT_BY
    assert filters.sort_order in ("asc", DEFAULT_SORT_ORDER)


def test_blank_search_is_dropped():
    assert TaskFilters(search="   ").normalized().search is None
    assert TaskFilters(search=" api ").normalized().search == "api"


def _titles(tasks):
    return [t["title"] for t in tasks]


@pytest.mark.asyncio
async def test_manager_partitions_are_disjoint(client, store):
    pm = await store.manager()
    dev = await store.member()
    await store.task(creator=pm, assignee=pm, title="own")
    await store.task(creator=pm, assignee=dev, title="delegated")
    await store.task(creator=pm, assignee=None, title="orphan")

    r = await client.get("/tasks", headers=auth(pm))
    body = r.json()

    assert body["kind"] == "partitioned"
    assert _titles(body["mine"]) == ["own"]
    assert sorted(_titles(body["team"])) == ["delegated", "orphan"]


@pytest.mark.asyncio
async def test_filters_apply_to_both_partitions(client, store):
    pm = await store.manager()
    dev = await store.member()
    await store.task(creator=pm, assignee=pm, title="mine urgent", priority="urgent")
    await store.task(creator=pm, assignee=pm, title="mine low", priority="low")
    await store.task(creator=pm, assignee=dev, title="team urgent", priority="urgent")
    await store.task(creator=pm, assignee=dev, title="team low", priority="low")

    r = await client.get("/tasks", params={"priority": "urgent"}, headers=auth(pm))
    body = r.json()
    assert _titles(body["mine"]) == ["mine urgent"]
    assert _titles(body["team"]) == ["team urgent"]


@pytest.mark.asyncio
async def test_search_is_case_insensitive_over_title_and_description(client, store):
    pm = await store.manager()
    await store.task(creator=pm, assignee=pm, title="Fix LOGIN form")
    await store.task(
        creator=pm, assignee=pm, title="Docs", description="mention the login page"
    )
    await store.task(creator=pm, assignee=pm, title="Unrelated")

    r = await client.get("/tasks", params={"search": "Login"}, headers=auth(pm))
    assert sorted(_titles(r.json()["mine"])) == ["Docs", "Fix LOGIN form"]


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client, store):
    pm = await store.manager()
    await store.task(creator=pm, assignee=pm, title="100% done")
    await store.task(creator=pm, assignee=pm, title="1000 done")

    r = await client.get("/tasks", params={"search": "0%"}, headers=auth(pm))
    assert _titles(r.json()["mine"]) == ["100% done"]


@pytest.mark.asyncio
async def test_assignee_filter_for_manager(client, store):
    pm = await store.manager()
    dev = await store.member()
    other = await store.member()
    await store.task(creator=pm, assignee=dev, title="dev")
    await store.task(creator=pm, assignee=other, title="other")

    r = await client.get("/tasks", params={"assigned_to": dev.id}, headers=auth(pm))
    body = r.json()
    assert body["mine"] == []
    assert _titles(body["team"]) == ["dev"]


@pytest.mark.asyncio
async def test_member_assignee_filter_is_ignored(client, store):
    pm = await store.manager()
    dev = await store.member()
    other = await store.member()
    await store.task(creator=pm, assignee=dev, title="mine")
    await store.task(creator=pm, assignee=other, title="theirs")

    r = await client.get("/tasks", params={"assigned_to": other.id}, headers=auth(dev))
    assert _titles(r.json()["items"]) == ["mine"]


@pytest.mark.asyncio
async def test_sorting_and_fallback(client, store):
    pm = await store.manager()
    for title in ("b", "c", "a"):
        await store.task(creator=pm, assignee=pm, title=title)

    r = await client.get(
        "/tasks", params={"sort_by": "title", "sort_order": "asc"}, headers=auth(pm)
    )
    assert _titles(r.json()["mine"]) == ["a", "b", "c"]

    # неизвестная колонка -> created_at desc, порядок вставки обратный
    r = await client.get(
        "/tasks", params={"sort_by": "nope", "sort_order": "??"}, headers=auth(pm)
    )
    assert _titles(r.json()["mine"]) == ["a", "c", "b"]


@pytest.mark.asyncio
async def test_deleted_tasks_are_hidden(client, store):
    pm = await store.manager()
    task = await store.task(creator=pm, assignee=pm, title="gone")
    await client.delete(f"/tasks/{task.id}", headers=auth(pm))

    r = await client.get("/tasks", headers=auth(pm))
    assert r.json()["mine"] == []
