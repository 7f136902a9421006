from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.application.services.subject_service import SubjectService
from studyplanner.application.services.task_service import TaskService
from studyplanner.application.services.timetable_service import TimetableService
from studyplanner.application.services.user_settings_service import UserSettingsService
from studyplanner.db.session import get_db
from studyplanner.infrastructure.repositories.task_repository import SQLTaskRepository
from studyplanner.infrastructure.repositories.timetable_repository import SQLTimetableRepository


def create_task_service(db: AsyncSession) -> TaskService:
    return TaskService(SQLTaskRepository(db), SubjectService(db))


def create_timetable_service(db: AsyncSession) -> TimetableService:
    return TimetableService(db, SQLTimetableRepository(db), SQLTaskRepository(db))


def get_subject_service(db: AsyncSession = Depends(get_db)) -> SubjectService:
    return SubjectService(db)


def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return create_task_service(db)


def get_timetable_service(db: AsyncSession = Depends(get_db)) -> TimetableService:
    return create_timetable_service(db)


def get_user_settings_service(db: AsyncSession = Depends(get_db)) -> UserSettingsService:
    return UserSettingsService(db)
