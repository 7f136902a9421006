from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

SlotStatus = Literal["pending", "done"]
SLOT_STATUSES: tuple[str, ...] = ("pending", "done")


@dataclass(frozen=True)
class StudyTask:
    """Minimal view of a task as the timetable engine sees it."""

    task_id: uuid.UUID | str
    title: str
    duration_minutes: int
    due_date: date
    subject_id: uuid.UUID | str | None = None
    preferred_time: str = "09:00"
    completed: bool = False
    owner_id: uuid.UUID | str | None = None


@dataclass(frozen=True)
class StudySettings:
    study_hours_per_day: float
    preferred_time: str = "09:00"
    timezone: str = "UTC"


@dataclass(frozen=True)
class DayWindow:
    """The single contiguous study interval of one calendar day, in UTC."""

    day: date
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class PlannedSlot:
    start: datetime
    end: datetime
    task_id: uuid.UUID | str | None = None
    status: SlotStatus = "pending"
    auto_generated: bool = True
    owner_id: uuid.UUID | str | None = None

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError("start must be earlier than end")
        if self.status not in SLOT_STATUSES:
            raise ValueError(f"status must be one of {SLOT_STATUSES}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)

    def overlaps(self, other: PlannedSlot) -> bool:
        return self.start < other.end and other.start < self.end
