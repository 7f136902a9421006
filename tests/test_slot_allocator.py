from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone

import pytest

from studyplanner.core.errors import (
    CapacityExceeded,
    InvalidRange,
    InvalidSettings,
    InvalidTask,
    InvariantViolation,
    RangeTooLarge,
    ValidationError,
)
from studyplanner.domain.value_objects.timetable import DayWindow, StudySettings, StudyTask
from studyplanner.services.timetable.day_slot_builder import window_for
from studyplanner.services.timetable.slot_allocator import OverflowPolicy, SlotAllocator

DAY1 = date(2026, 1, 5)
DAY2 = date(2026, 1, 6)
TWO_HOURS = StudySettings(study_hours_per_day=2, preferred_time="09:00")


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def task(task_id: str, minutes: int, due: date, **kwargs) -> StudyTask:
    return StudyTask(task_id=task_id, title=task_id.upper(), duration_minutes=minutes, due_date=due, **kwargs)


@pytest.fixture()
def allocator() -> SlotAllocator:
    return SlotAllocator()


def minutes_by_task(slots) -> dict:
    totals: dict = defaultdict(int)
    for s in slots:
        totals[s.task_id] += s.duration_minutes
    return dict(totals)


def test_two_day_scenario(allocator):
    tasks = [task("t1", 90, DAY1), task("t2", 60, DAY2)]
    result = allocator.allocate(tasks, DAY1, DAY2, TWO_HOURS)

    assert [(s.task_id, s.start, s.end) for s in result.slots] == [
        ("t1", at(DAY1, 9), at(DAY1, 10, 30)),
        ("t2", at(DAY1, 10, 30), at(DAY1, 11)),
        ("t2", at(DAY2, 9), at(DAY2, 9, 30)),
    ]
    assert result.overflow is None
    assert result.days_used == 2
    assert all(s.auto_generated and s.status == "pending" for s in result.slots)


def test_empty_input_yields_empty_result(allocator):
    result = allocator.allocate([], DAY1, DAY2, TWO_HOURS)
    assert result.slots == []
    assert result.overflow is None
    assert result.unplaced_minutes == {}


def test_completed_tasks_are_not_scheduled(allocator):
    tasks = [task("done", 60, DAY1, completed=True), task("open", 30, DAY2)]
    result = allocator.allocate(tasks, DAY1, DAY2, TWO_HOURS)
    assert [s.task_id for s in result.slots] == ["open"]
    assert result.slots[0].start == at(DAY1, 9)


def test_only_completed_tasks_is_empty(allocator):
    result = allocator.allocate([task("done", 60, DAY1, completed=True)], DAY1, DAY1, TWO_HOURS)
    assert result.slots == []


def test_earliest_due_first_regardless_of_input_order(allocator):
    tasks = [task("late", 30, DAY2), task("early", 30, DAY1)]
    result = allocator.allocate(tasks, DAY1, DAY2, TWO_HOURS)
    assert [s.task_id for s in result.slots] == ["early", "late"]


def test_equal_due_dates_keep_input_order(allocator):
    tasks = [task("b", 20, DAY1), task("a", 20, DAY1), task("c", 20, DAY1)]
    result = allocator.allocate(tasks, DAY1, DAY1, TWO_HOURS)
    assert [s.task_id for s in result.slots] == ["b", "a", "c"]


def test_long_task_is_split_across_days(allocator):
    result = allocator.allocate([task("big", 300, DAY1)], DAY1, DAY1 + timedelta(days=2), TWO_HOURS)
    assert [s.duration_minutes for s in result.slots] == [120, 120, 60]
    assert [s.start.date() for s in result.slots] == [DAY1, DAY2, DAY1 + timedelta(days=2)]


def test_slots_are_sorted_and_disjoint(allocator):
    tasks = [task(f"t{i}", 25 + i * 10, DAY1 + timedelta(days=i % 3)) for i in range(8)]
    result = allocator.allocate(tasks, DAY1, DAY1 + timedelta(days=6), TWO_HOURS)

    starts = [s.start for s in result.slots]
    assert starts == sorted(starts)
    for prev, cur in zip(result.slots, result.slots[1:]):
        assert not prev.overlaps(cur)
        assert prev.end <= cur.start


def test_slots_stay_inside_their_day_window(allocator):
    tasks = [task(f"t{i}", 70, DAY1) for i in range(5)]
    result = allocator.allocate(tasks, DAY1, DAY1 + timedelta(days=4), TWO_HOURS)
    for s in result.slots:
        w = window_for(s.start.date(), TWO_HOURS)
        assert w.start <= s.start < s.end <= w.end


def test_minutes_are_conserved_when_capacity_suffices(allocator):
    tasks = [task("a", 45, DAY1), task("b", 200, DAY2), task("c", 15, DAY2)]
    result = allocator.allocate(tasks, DAY1, DAY1 + timedelta(days=5), TWO_HOURS)
    assert minutes_by_task(result.slots) == {"a": 45, "b": 200, "c": 15}


def test_same_input_gives_same_output(allocator):
    tasks = [task("t1", 90, DAY1), task("t2", 60, DAY2)]
    first = allocator.allocate(tasks, DAY1, DAY2, TWO_HOURS)
    second = allocator.allocate(tasks, DAY1, DAY2, TWO_HOURS)
    assert first.slots == second.slots


def test_owner_is_stamped_on_every_slot(allocator):
    result = allocator.allocate([task("t1", 150, DAY1)], DAY1, DAY2, TWO_HOURS, owner_id="user-1")
    assert {s.owner_id for s in result.slots} == {"user-1"}


def test_truncate_reports_unplaced_minutes(allocator):
    tasks = [task("t1", 90, DAY1), task("t2", 60, DAY2)]
    result = allocator.allocate(tasks, DAY1, DAY1, TWO_HOURS, policy="truncate")

    assert result.policy is OverflowPolicy.TRUNCATE
    assert all(s.start.date() == DAY1 for s in result.slots)
    assert isinstance(result.overflow, CapacityExceeded)
    assert result.unplaced_minutes == {"t2": 30}
    assert result.overflow.details == {"unplaced_minutes": {"t2": 30}, "total_unplaced_minutes": 30}
    assert minutes_by_task(result.slots) == {"t1": 90, "t2": 30}


def test_truncate_rounds_partial_minutes_up(allocator):
    # 23:00 + 2h is clipped to 23:59:59.999, so 30m0.001s is left over
    late = StudySettings(study_hours_per_day=2, preferred_time="23:00")
    result = allocator.allocate([task("t1", 90, DAY1)], DAY1, DAY1, late, policy="truncate")
    assert result.unplaced_minutes == {"t1": 31}


def test_extend_keeps_placing_past_end_date(allocator):
    tasks = [task("t1", 90, DAY1), task("t2", 60, DAY2)]
    result = allocator.allocate(tasks, DAY1, DAY1, TWO_HOURS, policy=OverflowPolicy.EXTEND)

    assert result.overflow is None
    assert result.slots[-1].task_id == "t2"
    assert (result.slots[-1].start, result.slots[-1].end) == (at(DAY2, 9), at(DAY2, 9, 30))
    assert minutes_by_task(result.slots) == {"t1": 90, "t2": 60}


def test_policy_names_are_case_insensitive():
    assert OverflowPolicy.resolve("EXTEND") is OverflowPolicy.EXTEND
    assert OverflowPolicy.resolve(None) is OverflowPolicy.TRUNCATE


def test_unknown_policy_is_rejected(allocator):
    with pytest.raises(ValidationError) as exc:
        allocator.allocate([task("t1", 30, DAY1)], DAY1, DAY1, TWO_HOURS, policy="squeeze")
    assert exc.value.details["allowed"] == ["truncate", "extend"]


def test_start_after_end_is_invalid_range(allocator):
    with pytest.raises(InvalidRange) as exc:
        allocator.allocate([task("t1", 30, DAY1)], DAY2, DAY1, TWO_HOURS)
    assert exc.value.details == {"start_date": "2026-01-06", "end_date": "2026-01-05"}


def test_invalid_range_is_reported_even_without_tasks(allocator):
    with pytest.raises(InvalidRange):
        allocator.allocate([], DAY2, DAY1, TWO_HOURS)


def test_invalid_settings_are_reported_before_allocation(allocator):
    with pytest.raises(InvalidSettings):
        allocator.allocate([task("t1", 30, DAY1)], DAY1, DAY1, StudySettings(study_hours_per_day=0))


@pytest.mark.parametrize("minutes", [0, -15, 1.5, True])
def test_rejects_bad_durations(allocator, minutes):
    with pytest.raises(InvalidTask):
        allocator.allocate([task("t1", minutes, DAY1)], DAY1, DAY1, TWO_HOURS)


def test_rejects_missing_due_date(allocator):
    with pytest.raises(InvalidTask):
        allocator.allocate([task("t1", 30, "2026-01-05")], DAY1, DAY1, TWO_HOURS)


def test_range_longer_than_limit_is_rejected():
    allocator = SlotAllocator(max_range_days=7)
    with pytest.raises(RangeTooLarge) as exc:
        allocator.allocate([task("t1", 30, DAY1)], DAY1, DAY1 + timedelta(days=7), TWO_HOURS)
    assert exc.value.details == {"range_days": 8, "max_range_days": 7}


def test_slot_limit_is_enforced():
    allocator = SlotAllocator(max_slots=2)
    tasks = [task("a", 30, DAY1), task("b", 30, DAY1), task("c", 30, DAY1)]
    with pytest.raises(RangeTooLarge) as exc:
        allocator.allocate(tasks, DAY1, DAY1, TWO_HOURS)
    assert exc.value.code == "range_too_large"


def test_overlapping_output_is_an_invariant_violation():
    fixed = DayWindow(day=DAY1, start=at(DAY1, 9), end=at(DAY1, 10))

    def same_window_every_day(day, settings):
        return DayWindow(day=day, start=fixed.start, end=fixed.end)

    allocator = SlotAllocator(window_builder=same_window_every_day)
    with pytest.raises(InvariantViolation):
        allocator.allocate([task("t1", 120, DAY1)], DAY1, DAY2, TWO_HOURS)


def test_extend_with_empty_windows_stops_at_the_day_limit():
    allocator = SlotAllocator(max_range_days=10)
    tiny = StudySettings(study_hours_per_day=1e-12, preferred_time="09:00")
    with pytest.raises(RangeTooLarge) as exc:
        allocator.allocate([task("t1", 30, DAY1)], DAY1, DAY1, tiny, policy="extend")
    assert exc.value.details == {"max_range_days": 10, "policy": "extend"}


def test_extend_past_the_day_limit_is_rejected():
    allocator = SlotAllocator(max_range_days=3)
    with pytest.raises(RangeTooLarge):
        allocator.allocate([task("big", 600, DAY1)], DAY1, DAY1, TWO_HOURS, policy="extend")

    # three days of two hours is enough for 360 minutes
    result = allocator.allocate([task("fits", 360, DAY1)], DAY1, DAY1, TWO_HOURS, policy="extend")
    assert result.days_used == 3


def test_explicit_zero_limits_are_honoured():
    with pytest.raises(RangeTooLarge):
        SlotAllocator(max_slots=0).allocate([task("t1", 30, DAY1)], DAY1, DAY1, TWO_HOURS)
    with pytest.raises(RangeTooLarge):
        SlotAllocator(max_range_days=0).allocate([], DAY1, DAY1, TWO_HOURS)
