from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.domain.interfaces.timetable_repository import ITimetableRepository
from studyplanner.models.timetable_slot import TimetableSlot
from studyplanner.repositories import timetable_repo


class SQLTimetableRepository(ITimetableRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_in_range(self, user_id: uuid.UUID, start_from: datetime, start_to: datetime) -> list[TimetableSlot]:
        return await timetable_repo.list_in_range(
            self._session, user_id=user_id, start_from=start_from, start_to=start_to
        )

    async def find_by_ids(self, user_id: uuid.UUID, slot_ids: Iterable[uuid.UUID]) -> list[TimetableSlot]:
        return await timetable_repo.list_by_ids(self._session, user_id=user_id, slot_ids=slot_ids)

    async def find_by_id(self, slot_id: uuid.UUID, user_id: uuid.UUID) -> TimetableSlot | None:
        return await timetable_repo.get_by_id(self._session, slot_id=slot_id, user_id=user_id)

    async def find_overlapping(
        self,
        user_id: uuid.UUID,
        start: datetime,
        end: datetime,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> list[TimetableSlot]:
        return await timetable_repo.list_overlapping(
            self._session, user_id=user_id, start=start, end=end, exclude_id=exclude_id
        )

    async def replace_range(
        self,
        user_id: uuid.UUID,
        start_from: datetime,
        start_to: datetime,
        slots: Sequence[TimetableSlot],
    ) -> tuple[int, list[TimetableSlot]]:
        # Runs inside the caller's transaction; nothing is visible until it commits.
        deleted = await timetable_repo.delete_in_range(
            self._session, user_id=user_id, start_from=start_from, start_to=start_to
        )
        if slots:
            # slots that began before the range but reach into the new ones
            deleted += await timetable_repo.delete_overlapping(
                self._session,
                user_id=user_id,
                start=min(slot.start for slot in slots),
                end=max(slot.end for slot in slots),
            )
        created = await timetable_repo.bulk_create(self._session, list(slots))
        return deleted, created

    async def add(self, slot: TimetableSlot) -> TimetableSlot:
        created = await timetable_repo.bulk_create(self._session, [slot])
        return created[0]

    async def flush(self) -> None:
        await self._session.flush()

    async def delete(self, slot_id: uuid.UUID) -> None:
        await timetable_repo.remove(self._session, slot_id=slot_id)
