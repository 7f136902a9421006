from __future__ import annotations

import uuid
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from studyplanner.core.config import settings
from studyplanner.core.response import err

MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Injects:
      - request.state.request_id
      - request.state.client_timezone

    Rules:
      - X-Request-Id is required on mutating calls; reads get a generated one
      - X-Timezone is optional but must be a valid IANA name when sent
      - Both values are echoed back in every response
    """

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("X-Request-Id")
        if not req_id:
            if request.method in MUTATING_METHODS:
                return JSONResponse(
                    status_code=400,
                    content=err(request, "missing_request_id", "X-Request-Id header is required"),
                )
            req_id = str(uuid.uuid4())

        tz = request.headers.get("X-Timezone") or settings.DEFAULT_TIMEZONE
        try:
            ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError):
            return JSONResponse(
                status_code=400,
                content=err(request, "invalid_timezone", "Invalid X-Timezone header"),
                headers={"X-Request-Id": req_id},
            )

        request.state.request_id = req_id
        request.state.client_timezone = tz

        response: Response = await call_next(request)
        response.headers["X-Request-Id"] = req_id
        response.headers["X-Timezone"] = tz
        return response
