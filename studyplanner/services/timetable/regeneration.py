from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable

from studyplanner.core.errors import InvalidRange
from studyplanner.domain.value_objects.timetable import StudySettings, StudyTask
from studyplanner.services.timetable.day_slot_builder import day_bounds, resolve_timezone
from studyplanner.services.timetable.slot_allocator import AllocationResult, OverflowPolicy, SlotAllocator


def generate(
    tasks: Iterable[StudyTask],
    start_date: date,
    end_date: date,
    settings: StudySettings,
    *,
    policy: OverflowPolicy | str | None = None,
    allocator: SlotAllocator | None = None,
) -> AllocationResult:
    return (allocator or SlotAllocator()).allocate(tasks, start_date, end_date, settings, policy=policy)


def regenerate(
    owner_id: Any,
    start_date: date,
    end_date: date,
    tasks: Iterable[StudyTask],
    settings: StudySettings,
    *,
    policy: OverflowPolicy | str | None = None,
    allocator: SlotAllocator | None = None,
) -> AllocationResult:
    """Recompute the owner's timetable for ``[start_date, end_date]``.

    Pure: nothing is read from or written to storage and no earlier result is
    consulted, so identical inputs always give identical slots in identical
    order. Replacing previously stored slots is the caller's job; use
    :func:`replacement_bounds` for the range whose slots must be dropped.
    """
    return (allocator or SlotAllocator()).allocate(
        tasks,
        start_date,
        end_date,
        settings,
        policy=policy,
        owner_id=owner_id,
    )


def replacement_bounds(start_date: date, end_date: date, timezone_name: str) -> tuple[datetime, datetime]:
    """UTC instants bounding the stored slots a regeneration replaces.

    A stored slot is replaced when its ``start`` falls between local midnight
    of ``start_date`` and 23:59:59.999 of ``end_date``.
    """
    if start_date > end_date:
        raise InvalidRange(start_date, end_date)
    tz = resolve_timezone(timezone_name)
    lower, _ = day_bounds(start_date, tz)
    _, upper = day_bounds(end_date, tz)
    return lower, upper
