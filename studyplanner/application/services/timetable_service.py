from __future__ import annotations

import asyncio
import uuid
import weakref
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.core.logging import log
from studyplanner.domain.interfaces.task_repository import ITaskRepository
from studyplanner.domain.interfaces.timetable_repository import ITimetableRepository
from studyplanner.domain.value_objects.timetable import SLOT_STATUSES
from studyplanner.infrastructure.mappers.timetable_mapper import TimetableMapper
from studyplanner.models.timetable_slot import TimetableSlot
from studyplanner.models.user import User
from studyplanner.services.timetable import (
    AllocationResult,
    OverflowPolicy,
    SlotAllocator,
    day_bounds,
    regenerate,
    replacement_bounds,
    slots_for_day,
)
from studyplanner.services.timetable.day_slot_builder import resolve_timezone

# One regeneration per owner at a time within this process; the
# delete-then-insert below also runs in a single transaction.
# An entry lives only while some coroutine holds or waits on its lock.
_owner_locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = weakref.WeakValueDictionary()


@asynccontextmanager
async def owner_lock(owner_id: uuid.UUID) -> AsyncIterator[None]:
    lock = _owner_locks.get(owner_id)
    if lock is None:
        lock = asyncio.Lock()
        _owner_locks[owner_id] = lock
    async with lock:
        yield


@dataclass
class GenerationOutcome:
    slots: list[TimetableSlot]
    result: AllocationResult
    replaced: int


class TimetableService:
    def __init__(
        self,
        session: AsyncSession,
        slots: ITimetableRepository,
        tasks: ITaskRepository,
        allocator: SlotAllocator | None = None,
    ) -> None:
        self._session = session
        self._slots = slots
        self._tasks = tasks
        self._allocator = allocator or SlotAllocator()

    async def regenerate(
        self,
        user: User,
        start_date: date,
        end_date: date,
        *,
        policy: OverflowPolicy | str | None = None,
    ) -> GenerationOutcome:
        """Rebuild the user's timetable for a date range and persist it.

        Slots starting inside the range are replaced wholesale, manual ones
        included. The store is only touched after the engine returned.
        """
        settings = TimetableMapper.to_study_settings(user)

        async with owner_lock(user.id):
            tasks = await self._tasks.find_incomplete(user.id)
            result = regenerate(
                user.id,
                start_date,
                end_date,
                [TimetableMapper.to_study_task(task) for task in tasks],
                settings,
                policy=policy,
                allocator=self._allocator,
            )

            lower, upper = replacement_bounds(start_date, end_date, settings.timezone)
            if result.slots and result.slots[-1].end > upper:
                # extend policy placed work past end_date; clear everything starting before it ends
                upper = result.slots[-1].end - timedelta(microseconds=1)

            try:
                replaced, created = await self._slots.replace_range(
                    user.id,
                    lower,
                    upper,
                    [TimetableMapper.to_orm_slot(slot) for slot in result.slots],
                )
                created_ids = [slot.id for slot in created]
                await self._session.commit()
            except Exception:
                await self._session.rollback()
                raise

        stored = await self._slots.find_by_ids(user.id, created_ids)
        log.info(
            "timetable_regenerated",
            user_id=str(user.id),
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            policy=result.policy.value,
            replaced=replaced,
            created=len(stored),
            unplaced_minutes=sum(result.unplaced_minutes.values()),
        )
        return GenerationOutcome(slots=list(stored), result=result, replaced=replaced)

    async def slots_for_day(self, user: User, day: date) -> list[TimetableSlot]:
        tz = resolve_timezone(user.timezone)
        lower, upper = day_bounds(day, tz)
        stored = await self._slots.find_in_range(user.id, lower, upper)
        return slots_for_day(day, stored, user.timezone)

    async def get_slot(self, slot_id: uuid.UUID, user_id: uuid.UUID) -> TimetableSlot | None:
        return await self._slots.find_by_id(slot_id, user_id)

    async def create_manual_slot(self, user: User, data: dict) -> TimetableSlot:
        start, end = _aware(data["start"]), _aware(data["end"])
        if end <= start:
            raise ValueError("invalid_interval")
        task_id = data.get("task_id")
        if task_id is not None:
            await self._ensure_task(task_id, user.id)
        await self._ensure_free(user.id, start, end)

        now = datetime.now(timezone.utc)
        slot = TimetableSlot(
            user_id=user.id,
            task_id=task_id,
            start=start,
            end=end,
            status=data.get("status") or "pending",
            auto_generated=False,
            created_at=now,
            updated_at=now,
        )
        created = await self._slots.add(slot)
        await self._session.commit()
        return await self._slots.find_by_id(created.id, user.id)

    async def update_slot(self, slot: TimetableSlot, changes: dict) -> TimetableSlot:
        """Overwrite a slot with a manual edit.

        ``changes`` holds only the fields the client sent; ``task_id`` may be
        explicitly None to turn the slot into free time.
        """
        start = _aware(changes["start"]) if changes.get("start") else slot.start
        end = _aware(changes["end"]) if changes.get("end") else slot.end
        if end <= start:
            raise ValueError("invalid_interval")

        status = changes.get("status")
        if status is not None and status not in SLOT_STATUSES:
            raise ValueError("invalid_status")

        edited = False
        if "task_id" in changes and changes["task_id"] != slot.task_id:
            if changes["task_id"] is not None:
                await self._ensure_task(changes["task_id"], slot.user_id)
            slot.task_id = changes["task_id"]
            edited = True
        if start != slot.start or end != slot.end:
            await self._ensure_free(slot.user_id, start, end, exclude_id=slot.id)
            slot.start, slot.end = start, end
            edited = True
        if status is not None:
            slot.status = status
        if edited:
            slot.auto_generated = False
        slot.updated_at = datetime.now(timezone.utc)

        await self._slots.flush()
        await self._session.commit()
        return await self._slots.find_by_id(slot.id, slot.user_id)

    async def mark_done(self, slot: TimetableSlot) -> TimetableSlot:
        return await self.update_slot(slot, {"status": "done"})

    async def delete_slot(self, slot: TimetableSlot) -> None:
        await self._slots.delete(slot.id)
        await self._session.commit()

    async def _ensure_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> None:
        if not await self._tasks.find_by_id(task_id, user_id):
            raise ValueError("task_not_found")

    async def _ensure_free(
        self,
        user_id: uuid.UUID,
        start: datetime,
        end: datetime,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        if await self._slots.find_overlapping(user_id, start, end, exclude_id=exclude_id):
            raise ValueError("slot_overlap")


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
