from __future__ import annotations

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.models.subject import Subject


async def list(db: AsyncSession, *, user_id: uuid.UUID) -> list[Subject]:
    res = await db.execute(select(Subject).where(Subject.user_id == user_id).order_by(Subject.title.asc()))
    return res.scalars().all()


async def get_by_id(db: AsyncSession, *, subject_id: uuid.UUID, user_id: uuid.UUID) -> Subject | None:
    res = await db.execute(select(Subject).where(Subject.id == subject_id, Subject.user_id == user_id))
    return res.scalar_one_or_none()


async def create(db: AsyncSession, subject: Subject) -> Subject:
    db.add(subject)
    await db.flush()
    return subject


async def remove(db: AsyncSession, *, subject_id: uuid.UUID) -> None:
    await db.execute(delete(Subject).where(Subject.id == subject_id))
