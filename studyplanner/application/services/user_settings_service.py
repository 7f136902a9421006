from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.core.config import settings
from studyplanner.domain.value_objects.timetable import StudySettings
from studyplanner.infrastructure.mappers.timetable_mapper import TimetableMapper
from studyplanner.models.user import User
from studyplanner.repositories import users_repo
from studyplanner.services.timetable.day_slot_builder import validate_settings

SETTINGS_FIELDS = ("timezone", "study_hours_per_day", "preferred_time")


class UserSettingsService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def register(self, data: dict) -> User:
        if await users_repo.get_by_email(self._session, email=data["email"]):
            raise ValueError("user_exists")

        now = datetime.now(timezone.utc)
        user = User(
            email=data["email"],
            full_name=data.get("full_name"),
            timezone=data.get("timezone") or settings.DEFAULT_TIMEZONE,
            study_hours_per_day=data.get("study_hours_per_day") or settings.DEFAULT_STUDY_HOURS_PER_DAY,
            preferred_time=data.get("preferred_time") or settings.DEFAULT_PREFERRED_TIME,
            created_at=now,
            updated_at=now,
        )
        validate_settings(TimetableMapper.to_study_settings(user))
        return await users_repo.create(self._session, user)

    async def update_settings(self, user: User, patch: dict) -> User:
        values = {k: v for k, v in patch.items() if v is not None and k in SETTINGS_FIELDS}
        merged = StudySettings(
            study_hours_per_day=values.get("study_hours_per_day", user.study_hours_per_day),
            preferred_time=values.get("preferred_time", user.preferred_time),
            timezone=values.get("timezone", user.timezone),
        )
        # raises InvalidSettings before anything is written
        validate_settings(merged)

        values["updated_at"] = datetime.now(timezone.utc)
        await users_repo.patch(self._session, user_id=user.id, values=values)
        return await users_repo.get_by_id(self._session, user_id=user.id)
