from __future__ import annotations

import uuid
from typing import Any, Protocol, Sequence


class ITaskRepository(Protocol):
    async def find_by_id(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Any | None:
        """Return a task by id for a given user, or None if not found."""

    async def find_by_user(
        self,
        user_id: uuid.UUID,
        *,
        completed: bool | None = None,
        subject_id: uuid.UUID | None = None,
    ) -> Sequence[Any]:
        """Return a user's tasks ordered by due date, newest first within a day."""

    async def find_incomplete(self, user_id: uuid.UUID) -> Sequence[Any]:
        """Return a user's incomplete tasks in creation order."""

    async def save(self, task: Any) -> Any:
        """Persist a task instance and return it."""

    async def update_values(self, task_id: uuid.UUID, values: dict) -> None:
        """Apply partial updates to a task identified by id."""

    async def delete(self, task_id: uuid.UUID) -> None:
        """Delete a task and detach the timetable slots that reference it."""
