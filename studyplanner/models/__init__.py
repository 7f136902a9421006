from __future__ import annotations

# Import all models so Alembic sees them via Base.metadata
from studyplanner.models.user import User  # noqa: F401
from studyplanner.models.subject import Subject  # noqa: F401
from studyplanner.models.task import Task  # noqa: F401
from studyplanner.models.timetable_slot import TimetableSlot  # noqa: F401
