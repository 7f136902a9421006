from __future__ import annotations

import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.models.task import Task


async def list(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    completed: bool | None = None,
    subject_id: uuid.UUID | None = None,
) -> list[Task]:
    q = select(Task).where(Task.user_id == user_id)
    if completed is not None:
        q = q.where(Task.completed == completed)
    if subject_id:
        q = q.where(Task.subject_id == subject_id)
    q = q.order_by(Task.due_date.asc(), Task.created_at.desc(), Task.id.asc())
    res = await db.execute(q.execution_options(populate_existing=True))
    return res.scalars().all()


async def list_incomplete_for_planning(db: AsyncSession, *, user_id: uuid.UUID) -> list[Task]:
    # creation order is the tie-break for equal due dates
    q = (
        select(Task)
        .where(Task.user_id == user_id, Task.completed == False)  # noqa: E712
        .order_by(Task.created_at.asc(), Task.id.asc())
    )
    res = await db.execute(q)
    return res.scalars().all()


async def get_by_id(db: AsyncSession, *, task_id: uuid.UUID, user_id: uuid.UUID) -> Task | None:
    res = await db.execute(
        select(Task)
        .where(Task.id == task_id, Task.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def create(db: AsyncSession, task: Task) -> Task:
    db.add(task)
    await db.flush()
    return task


async def patch(db: AsyncSession, *, task_id: uuid.UUID, values: dict) -> None:
    await db.execute(update(Task).where(Task.id == task_id).values(**values))


async def remove(db: AsyncSession, *, task_id: uuid.UUID) -> None:
    await db.execute(delete(Task).where(Task.id == task_id))


async def count_for_subject(db: AsyncSession, *, subject_id: uuid.UUID) -> int:
    res = await db.execute(select(func.count()).select_from(Task).where(Task.subject_id == subject_id))
    return res.scalar_one()
