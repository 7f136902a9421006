from __future__ import annotations

import uuid
from datetime import datetime, timezone

from studyplanner.application.services.subject_service import SubjectService
from studyplanner.domain.interfaces.task_repository import ITaskRepository
from studyplanner.models.task import Task

UPDATABLE_FIELDS = {"title", "subject_id", "duration_minutes", "due_date", "preferred_time", "completed"}


class TaskService:
    def __init__(self, repo: ITaskRepository, subjects: SubjectService) -> None:
        self._repo = repo
        self._subjects = subjects

    async def get_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task | None:
        return await self._repo.find_by_id(task_id, user_id)

    async def list_tasks(
        self,
        user_id: uuid.UUID,
        *,
        completed: bool | None = None,
        subject_id: uuid.UUID | None = None,
    ) -> list[Task]:
        return list(await self._repo.find_by_user(user_id, completed=completed, subject_id=subject_id))

    async def create_task(self, user_id: uuid.UUID, data: dict) -> Task:
        await self._ensure_subject(data["subject_id"], user_id)

        now = datetime.now(timezone.utc)
        task = Task(
            user_id=user_id,
            subject_id=data["subject_id"],
            title=data["title"],
            duration_minutes=data.get("duration_minutes") or 60,
            due_date=data["due_date"],
            preferred_time=data.get("preferred_time") or "09:00",
            completed=False,
            created_at=now,
            updated_at=now,
        )
        saved = await self._repo.save(task)
        return await self._repo.find_by_id(saved.id, user_id)

    async def update_task(self, task: Task, patch: dict) -> Task:
        values = {k: v for k, v in patch.items() if v is not None and k in UPDATABLE_FIELDS}
        if "subject_id" in values and values["subject_id"] != task.subject_id:
            await self._ensure_subject(values["subject_id"], task.user_id)
        values["updated_at"] = datetime.now(timezone.utc)

        await self._repo.update_values(task_id=task.id, values=values)
        return await self._repo.find_by_id(task.id, task.user_id)

    async def delete_task(self, task: Task) -> None:
        await self._repo.delete(task.id)

    async def _ensure_subject(self, subject_id: uuid.UUID, user_id: uuid.UUID) -> None:
        if not await self._subjects.get_subject(subject_id, user_id):
            raise ValueError("subject_not_found")
