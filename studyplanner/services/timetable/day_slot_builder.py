"""Per-day study windows.

Every calendar day contributes at most one window: it opens at the user's
preferred time and stays open for ``study_hours_per_day`` hours of elapsed
time, clipped to the end of that same local day. Windows are returned in
UTC so that callers can compare and subtract them without tripping over
DST transitions.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from studyplanner.core.errors import InvalidSettings
from studyplanner.domain.value_objects.timetable import DayWindow, StudySettings

HHMM_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
END_OF_DAY = time(23, 59, 59, 999000)


def parse_preferred_time(value: str) -> time:
    if not isinstance(value, str) or not HHMM_PATTERN.match(value):
        raise InvalidSettings(
            "preferred_time must be in HH:MM format (24-hour)",
            details={"preferred_time": value},
        )
    hours, minutes = value.split(":")
    return time(hour=int(hours), minute=int(minutes))


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise InvalidSettings(f"Unknown timezone '{name}'", details={"timezone": name}) from exc


def validate_settings(settings: StudySettings) -> None:
    hours = settings.study_hours_per_day
    if isinstance(hours, bool) or not isinstance(hours, (int, float)) or not math.isfinite(hours) or hours <= 0:
        raise InvalidSettings(
            "study_hours_per_day must be a positive number",
            details={"study_hours_per_day": hours},
        )
    parse_preferred_time(settings.preferred_time)
    resolve_timezone(settings.timezone)


def local_to_utc(day: date, at: time, tz: ZoneInfo) -> datetime:
    # A wall time inside a DST gap is shifted forward by the size of the gap.
    return datetime.combine(day, at).replace(tzinfo=tz).astimezone(timezone.utc)


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """First and last instant (00:00 .. 23:59:59.999 local) of ``day`` in UTC."""
    return local_to_utc(day, time.min, tz), local_to_utc(day, END_OF_DAY, tz)


class DaySlotBuilder:
    def window_for(self, day: date, settings: StudySettings) -> DayWindow:
        validate_settings(settings)
        tz = resolve_timezone(settings.timezone)

        start = local_to_utc(day, parse_preferred_time(settings.preferred_time), tz)
        end = start + timedelta(hours=settings.study_hours_per_day)
        _, day_end = day_bounds(day, tz)
        if end > day_end:
            end = day_end
        return DayWindow(day=day, start=start, end=end)


_builder = DaySlotBuilder()


def window_for(day: date, settings: StudySettings) -> DayWindow:
    return _builder.window_for(day, settings)
