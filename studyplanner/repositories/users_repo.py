from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.models.user import User


async def get_by_id(db: AsyncSession, *, user_id: uuid.UUID) -> User | None:
    res = await db.execute(select(User).where(User.id == user_id).execution_options(populate_existing=True))
    return res.scalar_one_or_none()


async def get_by_email(db: AsyncSession, *, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def create(db: AsyncSession, user: User) -> User:
    db.add(user)
    await db.flush()
    return user


async def patch(db: AsyncSession, *, user_id: uuid.UUID, values: dict) -> None:
    await db.execute(update(User).where(User.id == user_id).values(**values))
