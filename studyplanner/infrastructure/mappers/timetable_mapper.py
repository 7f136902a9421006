from __future__ import annotations

from studyplanner.domain.value_objects.timetable import PlannedSlot, StudySettings, StudyTask
from studyplanner.models.task import Task
from studyplanner.models.timetable_slot import TimetableSlot
from studyplanner.models.user import User


class TimetableMapper:
    """Converts between ORM rows and the timetable engine's value objects."""

    @staticmethod
    def to_study_task(task: Task) -> StudyTask:
        return StudyTask(
            task_id=task.id,
            title=task.title,
            duration_minutes=task.duration_minutes,
            due_date=task.due_date,
            subject_id=task.subject_id,
            preferred_time=task.preferred_time,
            completed=task.completed,
            owner_id=task.user_id,
        )

    @staticmethod
    def to_study_settings(user: User) -> StudySettings:
        return StudySettings(
            study_hours_per_day=user.study_hours_per_day,
            preferred_time=user.preferred_time,
            timezone=user.timezone,
        )

    @staticmethod
    def to_orm_slot(slot: PlannedSlot) -> TimetableSlot:
        return TimetableSlot(
            user_id=slot.owner_id,
            task_id=slot.task_id,
            start=slot.start,
            end=slot.end,
            status=slot.status,
            auto_generated=slot.auto_generated,
        )
