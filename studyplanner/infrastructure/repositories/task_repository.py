from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.domain.interfaces.task_repository import ITaskRepository
from studyplanner.models.task import Task
from studyplanner.repositories import tasks_repo, timetable_repo


class SQLTaskRepository(ITaskRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_id(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task | None:
        return await tasks_repo.get_by_id(self._session, task_id=task_id, user_id=user_id)

    async def find_by_user(
        self,
        user_id: uuid.UUID,
        *,
        completed: bool | None = None,
        subject_id: uuid.UUID | None = None,
    ) -> list[Task]:
        return await tasks_repo.list(self._session, user_id=user_id, completed=completed, subject_id=subject_id)

    async def find_incomplete(self, user_id: uuid.UUID) -> list[Task]:
        return await tasks_repo.list_incomplete_for_planning(self._session, user_id=user_id)

    async def save(self, task: Task) -> Task:
        return await tasks_repo.create(self._session, task)

    async def update_values(self, task_id: uuid.UUID, values: dict) -> None:
        await tasks_repo.patch(self._session, task_id=task_id, values=values)

    async def delete(self, task_id: uuid.UUID) -> None:
        await timetable_repo.detach_task(self._session, task_id=task_id)
        await tasks_repo.remove(self._session, task_id=task_id)
