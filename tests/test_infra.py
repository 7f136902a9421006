from __future__ import annotations

import uuid

import pytest


@pytest.mark.asyncio
async def test_missing_request_id_400(client, paths):
    # Missing X-Request-Id should fail at middleware for mutating calls
    r = await client.post(paths["subjects"], json={"title": "x"}, headers={"X-Timezone": "UTC"})
    assert r.status_code == 400
    assert r.json().get("error", {}).get("code") == "missing_request_id"


@pytest.mark.asyncio
async def test_invalid_timezone_400(client, paths):
    r = await client.post(
        paths["users"],
        json={"email": "a@example.com"},
        headers={"X-Request-Id": str(uuid.uuid4()), "X-Timezone": "Not/A_Timezone"},
    )
    assert r.status_code == 400
    assert r.json().get("error", {}).get("code") == "invalid_timezone"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client, paths, make_headers):
    rid = str(uuid.uuid4())
    r = await client.post(paths["users"], json={"email": f"e_{uuid.uuid4().hex[:8]}@example.com"}, headers=make_headers(rid=rid))
    assert r.status_code == 201
    assert r.headers["X-Request-Id"] == rid
    assert r.json()["request_id"] == rid


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", [None, "not-a-uuid", str(uuid.uuid4())])
async def test_unknown_caller_401(client, paths, make_headers, user_id):
    r = await client.get(paths["tasks"], headers=make_headers(user_id=user_id))
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "unauthorized"


@pytest.mark.asyncio
async def test_body_validation_422_envelope(client, paths, auth):
    r = await client.post(paths["tasks"], json={"title": ""}, headers=auth())
    assert r.status_code == 422
    body = r.json()
    assert body["error"]["code"] == "validation_error"
    assert body["error"]["details"]["errors"]
    assert body["request_id"]
