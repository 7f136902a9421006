from __future__ import annotations

import uuid
from datetime import date

import pytest

from tests.conftest import create_subject, create_task, register


@pytest.mark.asyncio
async def test_create_and_list_tasks(client, paths, auth):
    subject_id = await create_subject(client, auth())
    created = await create_task(
        client, auth(), subject_id=subject_id, title="Read chapter 3", duration_minutes=45, due_date=date(2026, 1, 9)
    )
    assert created["duration_minutes"] == 45
    assert created["completed"] is False
    assert created["subject"]["title"] == "Math"

    r = await client.get(paths["tasks"], headers=auth())
    assert r.status_code == 200
    items = r.json()["data"]["items"]
    assert [t["id"] for t in items] == [created["id"]]


@pytest.mark.asyncio
async def test_list_orders_by_due_date_and_filters(client, paths, auth):
    math_id = await create_subject(client, auth(), "Math")
    bio_id = await create_subject(client, auth(), "Biology")
    late = await create_task(client, auth(), subject_id=math_id, title="late", duration_minutes=30, due_date=date(2026, 2, 1))
    early = await create_task(client, auth(), subject_id=bio_id, title="early", duration_minutes=30, due_date=date(2026, 1, 1))

    r = await client.get(paths["tasks"], headers=auth())
    assert [t["title"] for t in r.json()["data"]["items"]] == ["early", "late"]

    r = await client.get(paths["tasks"], params={"subject_id": math_id}, headers=auth())
    assert [t["id"] for t in r.json()["data"]["items"]] == [late["id"]]

    r = await client.put(f"{paths['tasks']}/{early['id']}", json={"completed": True}, headers=auth())
    assert r.status_code == 200
    assert r.json()["data"]["completed"] is True

    r = await client.get(paths["tasks"], params={"completed": "false"}, headers=auth())
    assert [t["id"] for t in r.json()["data"]["items"]] == [late["id"]]


@pytest.mark.asyncio
async def test_unknown_subject_422(client, paths, auth):
    body = {"title": "x", "subject_id": str(uuid.uuid4()), "due_date": "2026-01-05"}
    r = await client.post(paths["tasks"], json=body, headers=auth())
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_rejects_non_positive_duration(client, paths, auth):
    subject_id = await create_subject(client, auth())
    body = {"title": "x", "subject_id": subject_id, "duration_minutes": 0, "due_date": "2026-01-05"}
    r = await client.post(paths["tasks"], json=body, headers=auth())
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_update_and_delete_task(client, paths, auth):
    subject_id = await create_subject(client, auth())
    task = await create_task(client, auth(), subject_id=subject_id, title="T", duration_minutes=30, due_date=date(2026, 1, 5))
    url = f"{paths['tasks']}/{task['id']}"

    r = await client.put(url, json={"title": "Renamed", "duration_minutes": 75}, headers=auth())
    assert r.status_code == 200
    assert (r.json()["data"]["title"], r.json()["data"]["duration_minutes"]) == ("Renamed", 75)

    r = await client.delete(url, headers=auth())
    assert r.status_code == 200
    assert r.json()["data"]["message"] == "Task deleted successfully"

    r = await client.put(url, json={"title": "again"}, headers=auth())
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_tasks_are_private_to_their_owner(client, paths, auth, make_headers):
    subject_id = await create_subject(client, auth())
    task = await create_task(client, auth(), subject_id=subject_id, title="mine", duration_minutes=30, due_date=date(2026, 1, 5))

    other = await register(client, make_headers=make_headers)
    r = await client.get(paths["tasks"], headers=other())
    assert r.json()["data"]["items"] == []
    r = await client.delete(f"{paths['tasks']}/{task['id']}", headers=other())
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_subject_with_tasks_cannot_be_deleted(client, paths, auth):
    subject_id = await create_subject(client, auth())
    task = await create_task(client, auth(), subject_id=subject_id, title="T", duration_minutes=30, due_date=date(2026, 1, 5))

    r = await client.delete(f"{paths['subjects']}/{subject_id}", headers=auth())
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "conflict"

    await client.delete(f"{paths['tasks']}/{task['id']}", headers=auth())
    r = await client.delete(f"{paths['subjects']}/{subject_id}", headers=auth())
    assert r.status_code == 200

    r = await client.get(paths["subjects"], headers=auth())
    assert r.json()["data"]["items"] == []
