from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.api.deps import get_current_user
from studyplanner.api.errors import timetable_http_error
from studyplanner.application.services.user_settings_service import UserSettingsService
from studyplanner.core.errors import TimetableError
from studyplanner.core.logging import log
from studyplanner.core.response import err, ok
from studyplanner.db.session import get_db
from studyplanner.infrastructure.di import get_user_settings_service
from studyplanner.models.user import User
from studyplanner.schemas.user_settings import UserRegisterIn, UserSettingsIn, UserSettingsOut

router = APIRouter()


@router.post("/users", status_code=201)
async def register_user(
    request: Request,
    body: UserRegisterIn,
    db: AsyncSession = Depends(get_db),
    service: UserSettingsService = Depends(get_user_settings_service),
):
    try:
        user = await service.register(body.model_dump())
    except ValueError as exc:
        if str(exc) == "user_exists":
            raise HTTPException(status_code=409, detail=err(request, "user_exists", "User already exists"))
        raise
    except TimetableError as exc:
        raise timetable_http_error(request, exc)

    await db.commit()
    log.info("user_registered", request_id=request.state.request_id, user_id=str(user.id))
    return ok(request, UserSettingsOut.model_validate(user).model_dump())


@router.get("/user/settings")
async def get_settings(request: Request, current_user: User = Depends(get_current_user)):
    return ok(request, UserSettingsOut.model_validate(current_user).model_dump())


@router.put("/user/settings")
async def put_settings(
    request: Request,
    body: UserSettingsIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: UserSettingsService = Depends(get_user_settings_service),
):
    try:
        user = await service.update_settings(current_user, body.model_dump(exclude_unset=True))
    except TimetableError as exc:
        raise timetable_http_error(request, exc)

    await db.commit()
    log.info(
        "user_settings_updated",
        request_id=request.state.request_id,
        user_id=str(user.id),
        fields=sorted(body.model_fields_set),
    )
    return ok(request, UserSettingsOut.model_validate(user).model_dump())
