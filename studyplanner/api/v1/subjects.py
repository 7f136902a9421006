from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.api.deps import get_current_user
from studyplanner.application.services.subject_service import SubjectService
from studyplanner.core.logging import log
from studyplanner.core.response import err, ok
from studyplanner.db.session import get_db
from studyplanner.infrastructure.di import get_subject_service
from studyplanner.schemas.subjects import SubjectCreateIn, SubjectOut

router = APIRouter(prefix="/subjects")


@router.get("")
async def get_subjects(
    request: Request,
    current_user=Depends(get_current_user),
    service: SubjectService = Depends(get_subject_service),
):
    items = await service.list_subjects(current_user.id)
    return ok(request, {"items": [SubjectOut.model_validate(s).model_dump() for s in items]})


@router.post("", status_code=201)
async def post_subject(
    request: Request,
    body: SubjectCreateIn,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: SubjectService = Depends(get_subject_service),
):
    subject = await service.create_subject(current_user.id, body.model_dump())
    await db.commit()
    log.info(
        "subject_created",
        request_id=request.state.request_id,
        user_id=str(current_user.id),
        subject_id=str(subject.id),
    )
    return ok(request, SubjectOut.model_validate(subject).model_dump())


@router.delete("/{subject_id}")
async def delete_subject(
    request: Request,
    subject_id: uuid.UUID,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: SubjectService = Depends(get_subject_service),
):
    subject = await service.get_subject(subject_id, current_user.id)
    if not subject:
        raise HTTPException(status_code=404, detail=err(request, "not_found", "Subject not found"))

    try:
        await service.delete_subject(subject)
    except ValueError as exc:
        if str(exc) == "subject_in_use":
            raise HTTPException(
                status_code=409,
                detail=err(request, "conflict", "Subject still has tasks"),
            )
        raise

    await db.commit()
    return ok(request, {"status": "ok"})
