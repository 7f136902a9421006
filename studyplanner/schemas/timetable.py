from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from studyplanner.schemas.tasks import TaskOut


class TimetableGenerateIn(BaseModel):
    start_date: date
    end_date: date
    overflow_policy: Literal["truncate", "extend"] | None = None


class TimetableSlotCreateIn(BaseModel):
    start: datetime
    end: datetime
    task_id: uuid.UUID | None = None
    status: Literal["pending", "done"] = "pending"

    @model_validator(mode="after")
    def validate_range(self) -> "TimetableSlotCreateIn":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class TimetableSlotUpdateIn(BaseModel):
    start: datetime | None = None
    end: datetime | None = None
    task_id: uuid.UUID | None = None
    status: Literal["pending", "done"] | None = None


class TimetableSlotOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    start: datetime
    end: datetime
    task_id: uuid.UUID | None = None
    task: TaskOut | None = None
    status: str
    auto_generated: bool


class TimetableWarning(BaseModel):
    code: str
    message: str
    details: dict = {}


class TimetableGenerateOut(BaseModel):
    start_date: date
    end_date: date
    overflow_policy: str
    replaced: int
    slots: list[TimetableSlotOut]
    warnings: list[TimetableWarning] = []
