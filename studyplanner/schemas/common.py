from __future__ import annotations

import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

HHMM_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def check_hhmm(value: str | None) -> str | None:
    if value is not None and not HHMM_RE.match(value):
        raise ValueError("Preferred time must be in HH:MM format (24-hour)")
    return value


def check_timezone(value: str | None) -> str | None:
    if value is None:
        return value
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"'{value}' is not a valid IANA timezone") from exc
    return value
