from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.api.deps import get_current_user
from studyplanner.application.services.task_service import TaskService
from studyplanner.core.logging import log
from studyplanner.core.response import err, ok
from studyplanner.db.session import get_db
from studyplanner.infrastructure.di import get_task_service
from studyplanner.schemas.tasks import TaskCreateIn, TaskOut, TaskUpdateIn

router = APIRouter(prefix="/tasks")


def _subject_not_found(request: Request) -> HTTPException:
    return HTTPException(status_code=422, detail=err(request, "validation_error", "Subject not found"))


@router.get("")
async def get_tasks(
    request: Request,
    current_user=Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
    completed: bool | None = Query(default=None),
    subject_id: uuid.UUID | None = Query(default=None),
):
    items = await task_service.list_tasks(current_user.id, completed=completed, subject_id=subject_id)

    log.info(
        "tasks_list",
        request_id=request.state.request_id,
        user_id=str(current_user.id),
        count=len(items),
    )
    return ok(request, {"items": [TaskOut.model_validate(t).model_dump() for t in items]})


@router.post("", status_code=201)
async def post_task(
    request: Request,
    body: TaskCreateIn,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    try:
        task = await task_service.create_task(current_user.id, body.model_dump())
    except ValueError as exc:
        if str(exc) == "subject_not_found":
            raise _subject_not_found(request)
        raise
    await db.commit()

    log.info(
        "task_created",
        request_id=request.state.request_id,
        user_id=str(current_user.id),
        task_id=str(task.id),
    )
    return ok(request, TaskOut.model_validate(task).model_dump())


@router.put("/{task_id}")
async def put_task(
    request: Request,
    task_id: uuid.UUID,
    body: TaskUpdateIn,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    task = await task_service.get_task(task_id, current_user.id)
    if not task:
        raise HTTPException(status_code=404, detail=err(request, "not_found", "Task not found"))

    try:
        updated = await task_service.update_task(task, body.model_dump(exclude_unset=True))
    except ValueError as exc:
        if str(exc) == "subject_not_found":
            raise _subject_not_found(request)
        raise
    await db.commit()

    log.info(
        "task_updated",
        request_id=request.state.request_id,
        user_id=str(current_user.id),
        task_id=str(updated.id),
    )
    return ok(request, TaskOut.model_validate(updated).model_dump())


@router.delete("/{task_id}")
async def delete_task(
    request: Request,
    task_id: uuid.UUID,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    task_service: TaskService = Depends(get_task_service),
):
    task = await task_service.get_task(task_id, current_user.id)
    if not task:
        raise HTTPException(status_code=404, detail=err(request, "not_found", "Task not found"))

    await task_service.delete_task(task)
    await db.commit()
    log.info("task_deleted", request_id=request.state.request_id, user_id=str(current_user.id), task_id=str(task_id))
    return ok(request, {"message": "Task deleted successfully"})
