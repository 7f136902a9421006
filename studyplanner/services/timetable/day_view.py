from __future__ import annotations

from datetime import date
from typing import Iterable, TypeVar

from studyplanner.services.timetable.day_slot_builder import day_bounds, resolve_timezone

SlotT = TypeVar("SlotT")


def slots_for_day(day: date, slots: Iterable[SlotT], timezone_name: str = "UTC") -> list[SlotT]:
    """Slots whose ``start`` lies inside ``day`` (local calendar), earliest first.

    Works with anything exposing an aware ``start`` datetime: planned slots
    straight from the allocator or stored rows.
    """
    day_start, day_end = day_bounds(day, resolve_timezone(timezone_name))
    selected = [slot for slot in slots if day_start <= slot.start <= day_end]
    selected.sort(key=lambda slot: slot.start)
    return selected
