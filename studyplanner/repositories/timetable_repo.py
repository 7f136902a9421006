from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.models.timetable_slot import TimetableSlot


async def list_in_range(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    start_from: datetime,
    start_to: datetime,
) -> list[TimetableSlot]:
    q = (
        select(TimetableSlot)
        .where(
            TimetableSlot.user_id == user_id,
            TimetableSlot.start >= start_from,
            TimetableSlot.start <= start_to,
        )
        .order_by(TimetableSlot.start.asc(), TimetableSlot.id.asc())
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalars().all()


async def list_by_ids(db: AsyncSession, *, user_id: uuid.UUID, slot_ids: Iterable[uuid.UUID]) -> list[TimetableSlot]:
    ids = [*slot_ids]
    if not ids:
        return []
    res = await db.execute(
        select(TimetableSlot)
        .where(TimetableSlot.user_id == user_id, TimetableSlot.id.in_(ids))
        .order_by(TimetableSlot.start.asc())
        .execution_options(populate_existing=True)
    )
    return res.scalars().all()


async def get_by_id(db: AsyncSession, *, slot_id: uuid.UUID, user_id: uuid.UUID) -> TimetableSlot | None:
    res = await db.execute(
        select(TimetableSlot)
        .where(TimetableSlot.id == slot_id, TimetableSlot.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def delete_in_range(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    start_from: datetime,
    start_to: datetime,
) -> int:
    res = await db.execute(
        delete(TimetableSlot).where(
            TimetableSlot.user_id == user_id,
            TimetableSlot.start >= start_from,
            TimetableSlot.start <= start_to,
        )
    )
    return res.rowcount or 0


async def delete_overlapping(db: AsyncSession, *, user_id: uuid.UUID, start: datetime, end: datetime) -> int:
    res = await db.execute(
        delete(TimetableSlot).where(
            TimetableSlot.user_id == user_id,
            TimetableSlot.start < end,
            TimetableSlot.end > start,
        )
    )
    return res.rowcount or 0


async def bulk_create(db: AsyncSession, slots: list[TimetableSlot]) -> list[TimetableSlot]:
    db.add_all(slots)
    await db.flush()
    return slots


async def remove(db: AsyncSession, *, slot_id: uuid.UUID) -> None:
    await db.execute(delete(TimetableSlot).where(TimetableSlot.id == slot_id))


async def detach_task(db: AsyncSession, *, task_id: uuid.UUID) -> None:
    await db.execute(update(TimetableSlot).where(TimetableSlot.task_id == task_id).values(task_id=None))


async def list_overlapping(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    start: datetime,
    end: datetime,
    exclude_id: uuid.UUID | None = None,
) -> list[TimetableSlot]:
    q = select(TimetableSlot).where(
        TimetableSlot.user_id == user_id,
        TimetableSlot.start < end,
        TimetableSlot.end > start,
    )
    if exclude_id:
        q = q.where(TimetableSlot.id != exclude_id)
    res = await db.execute(q.order_by(TimetableSlot.start.asc()))
    return res.scalars().all()
