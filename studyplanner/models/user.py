from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Float, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from studyplanner.core.config import settings
from studyplanner.db.base import Base
from studyplanner.db.types import UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # study settings
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default=lambda: settings.DEFAULT_TIMEZONE)
    study_hours_per_day: Mapped[float] = mapped_column(
        Float, nullable=False, default=lambda: settings.DEFAULT_STUDY_HOURS_PER_DAY
    )
    preferred_time: Mapped[str] = mapped_column(
        String(5), nullable=False, default=lambda: settings.DEFAULT_PREFERRED_TIME
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
