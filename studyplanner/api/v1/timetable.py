from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from studyplanner.api.deps import get_current_user
from studyplanner.api.errors import timetable_http_error
from studyplanner.application.services.timetable_service import TimetableService
from studyplanner.core.errors import TimetableError
from studyplanner.core.logging import log
from studyplanner.core.response import err, ok
from studyplanner.infrastructure.di import get_timetable_service
from studyplanner.schemas.timetable import (
    TimetableGenerateIn,
    TimetableGenerateOut,
    TimetableSlotCreateIn,
    TimetableSlotOut,
    TimetableSlotUpdateIn,
    TimetableWarning,
)

router = APIRouter(prefix="/timetable")

_EDIT_ERRORS = {
    "invalid_interval": (422, "validation_error", "end must be after start"),
    "invalid_status": (422, "validation_error", "Unsupported slot status"),
    "task_not_found": (422, "validation_error", "Task not found"),
    "slot_overlap": (409, "slot_overlap", "Slot overlaps another timetable slot"),
}


def _edit_error(request: Request, exc: ValueError) -> HTTPException:
    status_code, code, message = _EDIT_ERRORS.get(str(exc), (400, "validation_error", "Invalid slot data"))
    return HTTPException(status_code=status_code, detail=err(request, code, message))


async def _slot_or_404(request: Request, service: TimetableService, slot_id: uuid.UUID, user_id: uuid.UUID):
    slot = await service.get_slot(slot_id, user_id)
    if not slot:
        raise HTTPException(status_code=404, detail=err(request, "not_found", "Timetable slot not found"))
    return slot


@router.post("/generate", status_code=201)
async def generate_timetable(
    request: Request,
    body: TimetableGenerateIn,
    current_user=Depends(get_current_user),
    service: TimetableService = Depends(get_timetable_service),
):
    try:
        outcome = await service.regenerate(
            current_user,
            body.start_date,
            body.end_date,
            policy=body.overflow_policy,
        )
    except TimetableError as exc:
        log.info(
            "timetable_generate_rejected",
            request_id=request.state.request_id,
            user_id=str(current_user.id),
            code=exc.code,
        )
        raise timetable_http_error(request, exc)

    warnings = []
    if outcome.result.overflow:
        overflow = outcome.result.overflow
        warnings.append(TimetableWarning(code=overflow.code, message=overflow.message, details=overflow.details))

    payload = TimetableGenerateOut(
        start_date=body.start_date,
        end_date=body.end_date,
        overflow_policy=outcome.result.policy.value,
        replaced=outcome.replaced,
        slots=[TimetableSlotOut.model_validate(slot) for slot in outcome.slots],
        warnings=warnings,
    )
    return ok(request, payload.model_dump())


@router.get("/day")
async def get_day_timetable(
    request: Request,
    day: date = Query(alias="date"),
    current_user=Depends(get_current_user),
    service: TimetableService = Depends(get_timetable_service),
):
    try:
        slots = await service.slots_for_day(current_user, day)
    except TimetableError as exc:
        raise timetable_http_error(request, exc)
    return ok(request, {"date": day, "items": [TimetableSlotOut.model_validate(s).model_dump() for s in slots]})


@router.post("", status_code=201)
async def create_timetable_slot(
    request: Request,
    body: TimetableSlotCreateIn,
    current_user=Depends(get_current_user),
    service: TimetableService = Depends(get_timetable_service),
):
    try:
        slot = await service.create_manual_slot(current_user, body.model_dump())
    except ValueError as exc:
        raise _edit_error(request, exc)

    log.info("timetable_slot_created", request_id=request.state.request_id, slot_id=str(slot.id))
    return ok(request, TimetableSlotOut.model_validate(slot).model_dump())


@router.put("/{slot_id}")
async def update_timetable_slot(
    request: Request,
    slot_id: uuid.UUID,
    body: TimetableSlotUpdateIn,
    current_user=Depends(get_current_user),
    service: TimetableService = Depends(get_timetable_service),
):
    slot = await _slot_or_404(request, service, slot_id, current_user.id)
    try:
        updated = await service.update_slot(slot, body.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise _edit_error(request, exc)

    log.info("timetable_slot_updated", request_id=request.state.request_id, slot_id=str(slot_id))
    return ok(request, TimetableSlotOut.model_validate(updated).model_dump())


@router.post("/{slot_id}/done")
async def mark_slot_done(
    request: Request,
    slot_id: uuid.UUID,
    current_user=Depends(get_current_user),
    service: TimetableService = Depends(get_timetable_service),
):
    slot = await _slot_or_404(request, service, slot_id, current_user.id)
    updated = await service.mark_done(slot)
    return ok(request, TimetableSlotOut.model_validate(updated).model_dump())


@router.delete("/{slot_id}")
async def delete_timetable_slot(
    request: Request,
    slot_id: uuid.UUID,
    current_user=Depends(get_current_user),
    service: TimetableService = Depends(get_timetable_service),
):
    slot = await _slot_or_404(request, service, slot_id, current_user.id)
    await service.delete_slot(slot)
    return ok(request, {"message": "Timetable slot deleted"})
