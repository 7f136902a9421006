from __future__ import annotations

from typing import Any


class TimetableError(Exception):
    """Base class for timetable engine errors."""

    code = "timetable_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(TimetableError):
    """Bad input, reported before any computation happens."""

    code = "validation_error"


class InvalidRange(ValidationError):
    def __init__(self, start_date, end_date):
        super().__init__(
            f"start_date {start_date} is after end_date {end_date}",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )


class InvalidSettings(ValidationError):
    pass


class InvalidTask(ValidationError):
    pass


class CapacityExceeded(TimetableError):
    """Tasks that did not fit into the requested range.

    Recoverable: the caller may widen the range and regenerate. ``unplaced``
    maps task id to the number of minutes that could not be allocated.
    """

    code = "capacity_exceeded"

    def __init__(self, unplaced: dict[Any, int]):
        self.unplaced = dict(unplaced)
        total = sum(self.unplaced.values())
        super().__init__(
            f"{total} minutes across {len(self.unplaced)} task(s) did not fit in the requested range",
            details={
                "unplaced_minutes": {str(task_id): minutes for task_id, minutes in self.unplaced.items()},
                "total_unplaced_minutes": total,
            },
        )


class RangeTooLarge(TimetableError):
    code = "range_too_large"


class InvariantViolation(TimetableError):
    """The allocator produced overlapping slots. Always a bug."""

    code = "invariant_violation"
