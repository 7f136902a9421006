from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from studyplanner.db.base import Base
from studyplanner.models.user import User  # noqa: F401
from studyplanner.models.subject import Subject  # noqa: F401
from studyplanner.models.task import Task  # noqa: F401
from studyplanner.models.timetable_slot import TimetableSlot  # noqa: F401


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
