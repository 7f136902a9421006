from __future__ import annotations

from fastapi import HTTPException, Request

from studyplanner.core.errors import RangeTooLarge, TimetableError, ValidationError
from studyplanner.core.response import err


def timetable_http_error(request: Request, exc: TimetableError) -> HTTPException:
    status_code = 422 if isinstance(exc, (ValidationError, RangeTooLarge)) else 500
    return HTTPException(status_code=status_code, detail=err(request, exc.code, exc.message, exc.details))
