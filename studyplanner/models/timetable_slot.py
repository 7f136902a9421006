from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyplanner.db.base import Base
from studyplanner.db.types import UTCDateTime
from studyplanner.models.task import Task


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimetableSlot(Base):
    __tablename__ = "timetable_slots"
    __table_args__ = (Index("ix_timetable_slots_user_id_start_at", "user_id", "start_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    task_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True
    )

    start: Mapped[datetime] = mapped_column("start_at", UTCDateTime, nullable=False)
    end: Mapped[datetime] = mapped_column("end_at", UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    auto_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    task: Mapped[Task | None] = relationship(Task, lazy="selectin")

    def __repr__(self) -> str:
        return f"TimetableSlot(id={self.id}, start={self.start}, end={self.end}, status={self.status})"
