from __future__ import annotations

from studyplanner.services.timetable.day_slot_builder import DaySlotBuilder, day_bounds, window_for
from studyplanner.services.timetable.day_view import slots_for_day
from studyplanner.services.timetable.regeneration import generate, regenerate, replacement_bounds
from studyplanner.services.timetable.slot_allocator import AllocationResult, OverflowPolicy, SlotAllocator

__all__ = [
    "AllocationResult",
    "DaySlotBuilder",
    "OverflowPolicy",
    "SlotAllocator",
    "day_bounds",
    "generate",
    "regenerate",
    "replacement_bounds",
    "slots_for_day",
    "window_for",
]
