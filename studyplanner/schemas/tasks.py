from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from studyplanner.schemas.common import check_hhmm
from studyplanner.schemas.subjects import SubjectOut


class TaskCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    subject_id: uuid.UUID
    duration_minutes: int = Field(default=60, ge=1, le=24 * 60 * 30)
    due_date: date
    preferred_time: str = "09:00"

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please provide a task title")
        return value

    @field_validator("preferred_time")
    @classmethod
    def validate_preferred_time(cls, value: str) -> str:
        return check_hhmm(value)


class TaskUpdateIn(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    subject_id: uuid.UUID | None = None
    duration_minutes: int | None = Field(default=None, ge=1, le=24 * 60 * 30)
    due_date: date | None = None
    preferred_time: str | None = None
    completed: bool | None = None

    @field_validator("preferred_time")
    @classmethod
    def validate_preferred_time(cls, value: str | None) -> str | None:
        return check_hhmm(value)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    subject_id: uuid.UUID
    subject: SubjectOut | None = None
    duration_minutes: int
    due_date: date
    preferred_time: str
    completed: bool
    created_at: datetime
    updated_at: datetime
