from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.models.subject import Subject
from studyplanner.repositories import subjects_repo, tasks_repo


class SubjectService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_subjects(self, user_id: uuid.UUID) -> list[Subject]:
        return list(await subjects_repo.list(self._session, user_id=user_id))

    async def get_subject(self, subject_id: uuid.UUID, user_id: uuid.UUID) -> Subject | None:
        return await subjects_repo.get_by_id(self._session, subject_id=subject_id, user_id=user_id)

    async def create_subject(self, user_id: uuid.UUID, data: dict) -> Subject:
        now = datetime.now(timezone.utc)
        subject = Subject(
            user_id=user_id,
            title=data["title"],
            color=data.get("color") or "#4f46e5",
            created_at=now,
            updated_at=now,
        )
        return await subjects_repo.create(self._session, subject)

    async def delete_subject(self, subject: Subject) -> None:
        if await tasks_repo.count_for_subject(self._session, subject_id=subject.id):
            raise ValueError("subject_in_use")
        await subjects_repo.remove(self._session, subject_id=subject.id)
