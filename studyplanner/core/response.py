from __future__ import annotations

import uuid
from typing import Any

from fastapi import Request


def _request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    return request_id


def ok(request: Request, data: Any) -> dict[str, Any]:
    return {"data": data, "request_id": _request_id(request)}


def err(request: Request, code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "error": {"code": code, "message": message, "details": details or {}},
        "request_id": _request_id(request),
    }
