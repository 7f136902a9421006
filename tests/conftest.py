from __future__ import annotations

import os
import tempfile
import uuid
from datetime import date
from typing import Callable

import pytest
from httpx import ASGITransport, AsyncClient

# IMPORTANT:
# Set env BEFORE importing app (settings are read at import time)
_DB_PATH = os.path.join(tempfile.gettempdir(), f"studyplanner_test_{uuid.uuid4().hex[:8]}.db")
os.environ.setdefault("APP_ENV", "local")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_DB_PATH}")
os.environ.setdefault("TIMETABLE_OVERFLOW_POLICY", "truncate")
os.environ.setdefault("PYTHONUNBUFFERED", "1")


@pytest.fixture(scope="session")
def any_tz() -> str:
    return "UTC"


def _headers(*, tz: str, rid: str | None = None, user_id: str | None = None) -> dict[str, str]:
    h = {"X-Timezone": tz}
    if rid is not None:
        h["X-Request-Id"] = rid
    if user_id is not None:
        h["X-User-Id"] = user_id
    return h


@pytest.fixture(scope="session")
def make_headers(any_tz):
    def _mk(rid: str | None = None, user_id: str | None = None, tz: str | None = None) -> dict[str, str]:
        return _headers(tz=tz or any_tz, rid=rid, user_id=user_id)
    return _mk


@pytest.fixture(scope="session")
def app():
    from studyplanner.main import app as fastapi_app
    return fastapi_app


@pytest.fixture(autouse=True)
async def fresh_schema():
    # ASGITransport does not run the lifespan, so tables are managed here
    from studyplanner.db.init_db import drop_db, init_db
    from studyplanner.db.session import engine

    await drop_db(engine)
    await init_db(engine)
    yield


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(scope="session")
def paths():
    return {
        "users": "/v1/users",
        "settings": "/v1/user/settings",
        "subjects": "/v1/subjects",
        "tasks": "/v1/tasks",
        "generate": "/v1/timetable/generate",
        "day": "/v1/timetable/day",
        "timetable": "/v1/timetable",
    }


async def register(client: AsyncClient, *, make_headers, **settings) -> Callable[..., dict[str, str]]:
    """Create a user and return headers that act on their behalf."""
    body = {"email": f"u_{uuid.uuid4().hex[:10]}@example.com", "full_name": "Test", "timezone": "UTC"}
    body.update(settings)
    r = await client.post("/v1/users", json=body, headers=make_headers(rid=str(uuid.uuid4())))
    assert r.status_code == 201, r.text
    user_id = r.json()["data"]["id"]

    def _auth(rid: str | None = None, tz: str | None = None) -> dict[str, str]:
        return make_headers(rid=rid or str(uuid.uuid4()), user_id=user_id, tz=tz)

    return _auth


@pytest.fixture()
async def auth(client, make_headers):
    return await register(client, make_headers=make_headers, study_hours_per_day=3, preferred_time="09:00")


async def create_subject(client: AsyncClient, headers: dict[str, str], title: str = "Math") -> str:
    r = await client.post("/v1/subjects", json={"title": title}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]["id"]


async def create_task(
    client: AsyncClient,
    headers: dict[str, str],
    *,
    subject_id: str,
    title: str,
    duration_minutes: int,
    due_date: date,
) -> dict:
    body = {
        "title": title,
        "subject_id": subject_id,
        "duration_minutes": duration_minutes,
        "due_date": due_date.isoformat(),
    }
    r = await client.post("/v1/tasks", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]
