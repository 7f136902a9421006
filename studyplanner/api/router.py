from __future__ import annotations

from fastapi import APIRouter

from studyplanner.api.v1.subjects import router as subjects_router
from studyplanner.api.v1.tasks import router as tasks_router
from studyplanner.api.v1.timetable import router as timetable_router
from studyplanner.api.v1.user_settings import router as user_router

api_router = APIRouter()
api_router.include_router(user_router, tags=["user"])
api_router.include_router(subjects_router, tags=["subjects"])
api_router.include_router(tasks_router, tags=["tasks"])
api_router.include_router(timetable_router, tags=["timetable"])
