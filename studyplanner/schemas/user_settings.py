from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from studyplanner.schemas.common import check_hhmm, check_timezone

# one minute a day
MIN_STUDY_HOURS_PER_DAY = 1 / 60


class UserRegisterIn(BaseModel):
    email: EmailStr
    full_name: str | None = Field(default=None, max_length=200)
    timezone: str | None = None
    study_hours_per_day: float | None = Field(default=None, ge=MIN_STUDY_HOURS_PER_DAY, le=24)
    preferred_time: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        return check_timezone(value)

    @field_validator("preferred_time")
    @classmethod
    def validate_preferred_time(cls, value: str | None) -> str | None:
        return check_hhmm(value)


class UserSettingsIn(BaseModel):
    timezone: str | None = None
    study_hours_per_day: float | None = Field(default=None, ge=MIN_STUDY_HOURS_PER_DAY, le=24)
    preferred_time: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        return check_timezone(value)

    @field_validator("preferred_time")
    @classmethod
    def validate_preferred_time(cls, value: str | None) -> str | None:
        return check_hhmm(value)


class UserSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: str | None = None
    timezone: str
    study_hours_per_day: float
    preferred_time: str
