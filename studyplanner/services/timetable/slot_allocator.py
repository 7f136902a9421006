from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Iterable

from studyplanner.core.config import settings as app_settings
from studyplanner.core.errors import (
    CapacityExceeded,
    InvalidRange,
    InvalidTask,
    InvariantViolation,
    RangeTooLarge,
    ValidationError,
)
from studyplanner.core.logging import log
from studyplanner.domain.value_objects.timetable import DayWindow, PlannedSlot, StudySettings, StudyTask
from studyplanner.services.timetable.day_slot_builder import validate_settings, window_for

_ZERO = timedelta(0)


class OverflowPolicy(str, Enum):
    """What to do with task time that does not fit before ``end_date``."""

    TRUNCATE = "truncate"
    EXTEND = "extend"

    @classmethod
    def resolve(cls, value: OverflowPolicy | str | None) -> OverflowPolicy:
        if value is None:
            value = app_settings.TIMETABLE_OVERFLOW_POLICY
        try:
            return cls(value.lower() if isinstance(value, str) else value)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown overflow policy '{value}'",
                details={"allowed": [policy.value for policy in cls]},
            ) from exc


@dataclass(frozen=True)
class AllocationResult:
    slots: list[PlannedSlot]
    policy: OverflowPolicy
    overflow: CapacityExceeded | None = None
    days_used: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def unplaced_minutes(self) -> dict[Any, int]:
        return dict(self.overflow.unplaced) if self.overflow else {}


def _validate_task(task: StudyTask) -> None:
    minutes = task.duration_minutes
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise InvalidTask(
            "duration_minutes must be a positive integer",
            details={"task_id": str(task.task_id), "duration_minutes": minutes},
        )
    if not isinstance(task.due_date, date):
        raise InvalidTask("due_date must be a calendar date", details={"task_id": str(task.task_id)})


def _due_key(task: StudyTask) -> date:
    due = task.due_date
    return due.date() if isinstance(due, datetime) else due


def _to_minutes(value: timedelta) -> int:
    return math.ceil(value.total_seconds() / 60)


def _assert_no_overlap(slots: list[PlannedSlot]) -> None:
    for previous, current in zip(slots, slots[1:]):
        if current.start < previous.end:
            raise InvariantViolation(
                "Allocator emitted overlapping slots",
                details={
                    "first": [previous.start.isoformat(), previous.end.isoformat()],
                    "second": [current.start.isoformat(), current.end.isoformat()],
                },
            )


class SlotAllocator:
    """Greedy earliest-due-first packing of tasks into daily study windows.

    Tasks are placed back to back starting at the first day's window. When a
    window fills up the cursor jumps to the next day's window start, so a
    long task is split across as many slots and days as it needs. Capacity
    left at the end of a day is not materialised as a slot.

    The allocator keeps no state between calls; every call works on its own
    local cursor, which makes it safe to share one instance across threads.
    """

    def __init__(
        self,
        *,
        max_slots: int | None = None,
        max_range_days: int | None = None,
        window_builder: Callable[[date, StudySettings], DayWindow] = window_for,
    ) -> None:
        self.max_slots = app_settings.TIMETABLE_MAX_SLOTS if max_slots is None else max_slots
        self.max_range_days = app_settings.TIMETABLE_MAX_RANGE_DAYS if max_range_days is None else max_range_days
        self._window_for = window_builder

    def allocate(
        self,
        tasks: Iterable[StudyTask],
        start_date: date,
        end_date: date,
        settings: StudySettings,
        *,
        policy: OverflowPolicy | str | None = None,
        owner_id: Any = None,
    ) -> AllocationResult:
        if start_date > end_date:
            raise InvalidRange(start_date, end_date)
        validate_settings(settings)
        policy = OverflowPolicy.resolve(policy)

        range_days = (end_date - start_date).days + 1
        if range_days > self.max_range_days:
            raise RangeTooLarge(
                f"Requested range spans {range_days} days, the limit is {self.max_range_days}",
                details={"range_days": range_days, "max_range_days": self.max_range_days},
            )

        pending = [task for task in tasks if not task.completed]
        for task in pending:
            _validate_task(task)

        # sorted() is stable: equal due dates keep the caller's (creation) order
        ordered = sorted(pending, key=_due_key)
        if not ordered:
            return AllocationResult(slots=[], policy=policy, metadata={"tasks": 0, "slots": 0})

        slots: list[PlannedSlot] = []
        unplaced: dict[Any, int] = {}
        window = self._window_for(start_date, settings)
        cursor = window.start
        days_used = 1

        for task in ordered:
            remaining = timedelta(minutes=task.duration_minutes)
            while remaining > _ZERO:
                if cursor >= window.end:
                    next_day = window.day + timedelta(days=1)
                    if next_day > end_date and policy is OverflowPolicy.TRUNCATE:
                        break
                    walked = (next_day - start_date).days + 1
                    if walked > self.max_range_days:
                        raise RangeTooLarge(
                            f"Placing every task would take more than {self.max_range_days} days",
                            details={"max_range_days": self.max_range_days, "policy": policy.value},
                        )
                    window = self._window_for(next_day, settings)
                    cursor = window.start
                    days_used += 1
                    continue

                if len(slots) >= self.max_slots:
                    raise RangeTooLarge(
                        f"Timetable would need more than {self.max_slots} slots",
                        details={"max_slots": self.max_slots, "policy": policy.value},
                    )

                allocated = min(remaining, window.end - cursor)
                slots.append(
                    PlannedSlot(
                        start=cursor,
                        end=cursor + allocated,
                        task_id=task.task_id,
                        status="pending",
                        auto_generated=True,
                        owner_id=owner_id,
                    )
                )
                cursor += allocated
                remaining -= allocated

            if remaining > _ZERO:
                unplaced[task.task_id] = unplaced.get(task.task_id, 0) + _to_minutes(remaining)

        slots.sort(key=lambda slot: slot.start)
        _assert_no_overlap(slots)

        overflow = CapacityExceeded(unplaced) if unplaced else None
        metadata = {
            "tasks": len(ordered),
            "slots": len(slots),
            "days_used": days_used,
            "range_days": range_days,
            "policy": policy.value,
        }
        if overflow:
            log.warning(
                "timetable_overflow",
                owner_id=str(owner_id) if owner_id is not None else None,
                unplaced_tasks=len(unplaced),
                unplaced_minutes=sum(unplaced.values()),
            )
        log.debug("timetable_generated", owner_id=str(owner_id) if owner_id is not None else None, **metadata)
        return AllocationResult(
            slots=slots,
            policy=policy,
            overflow=overflow,
            days_used=days_used,
            metadata=metadata,
        )
