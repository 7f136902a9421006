from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Iterable, Protocol, Sequence


class ITimetableRepository(Protocol):
    async def find_in_range(self, user_id: uuid.UUID, start_from: datetime, start_to: datetime) -> Sequence[Any]:
        """Return stored slots whose start lies in [start_from, start_to], ordered by start."""

    async def find_by_ids(self, user_id: uuid.UUID, slot_ids: Iterable[uuid.UUID]) -> Sequence[Any]:
        """Return the given slots of a user, ordered by start."""

    async def find_by_id(self, slot_id: uuid.UUID, user_id: uuid.UUID) -> Any | None:
        """Return one slot of a user, or None if not found."""

    async def find_overlapping(
        self,
        user_id: uuid.UUID,
        start: datetime,
        end: datetime,
        *,
        exclude_id: uuid.UUID | None = None,
    ) -> Sequence[Any]:
        """Return the user's slots whose [start, end) intersects the given interval."""

    async def replace_range(
        self,
        user_id: uuid.UUID,
        start_from: datetime,
        start_to: datetime,
        slots: Sequence[Any],
    ) -> tuple[int, Sequence[Any]]:
        """Delete the user's slots starting in the range, and any that overlap
        ``slots``, then insert ``slots``.

        Returns the number of deleted rows and the inserted slots.
        """

    async def add(self, slot: Any) -> Any:
        """Persist a single slot and return it."""

    async def flush(self) -> None:
        """Send pending attribute changes to the database."""

    async def delete(self, slot_id: uuid.UUID) -> None:
        """Delete one slot."""
