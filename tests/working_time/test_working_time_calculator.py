from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.worktime.worktime.calendars.model import CalendarConfig
from src.worktime.worktime.core.exceptions import ConfigurationError
from src.worktime.worktime.leaves.model import LeaveRecord
from src.worktime.worktime.working_time.calculator import (
    WorkingTimeCalculator,
    overdue_working_minutes,
    remaining_working_minutes,
)

# 2025-01-06 is a Monday.
MON, TUE, WED, FRI, SAT, MON_NEXT = 6, 7, 8, 10, 11, 13


def utc(day: int, hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2025, 1, day, hour, minute, second, tzinfo=timezone.utc)


def office_calendar(**overrides) -> CalendarConfig:
    values = dict(working_days=[1, 2, 3, 4, 5], start_time="09:00", end_time="17:00", timezone="UTC")
    values.update(overrides)
    return CalendarConfig(**values)


def night_calendar(**overrides) -> CalendarConfig:
    return office_calendar(start_time="22:00", end_time="06:00", **overrides)


class FixedOffsetConverter:
    """Test double: local time is UTC shifted by a fixed offset, zone name ignored."""

    def __init__(self, hours: int):
        self._offset = timedelta(hours=hours)

    def to_local(self, instant: datetime, tz_name: str) -> datetime:
        return (instant.astimezone(timezone.utc) + self._offset).replace(tzinfo=None, microsecond=0)

    def to_utc(self, local: datetime, tz_name: str) -> datetime:
        return (local - self._offset).replace(tzinfo=timezone.utc)


def test_full_shift_counts_every_minute():
    assert remaining_working_minutes(utc(MON, 9), utc(MON, 17), office_calendar(), []) == 480


@pytest.mark.parametrize("deadline", [utc(MON, 9), utc(MON, 8), utc(1, 0)])
def test_deadline_not_after_now_is_zero(deadline):
    assert remaining_working_minutes(utc(MON, 9), deadline, office_calendar(), []) == 0


def test_before_and_after_shift_fast_forward_without_counting():
    cal = office_calendar()
    assert remaining_working_minutes(utc(MON, 7), utc(MON, 10), cal, []) == 60
    assert remaining_working_minutes(utc(MON, 18), utc(TUE, 10), cal, []) == 60


def test_deadline_on_shift_boundary_is_exclusive():
    cal = office_calendar()
    assert remaining_working_minutes(utc(MON, 16), utc(MON, 17), cal, []) == 60
    assert remaining_working_minutes(utc(MON, 16), utc(MON, 17, 1), cal, []) == 60


def test_partial_minutes_are_truncated():
    assert remaining_working_minutes(utc(MON, 9, 0, 30), utc(MON, 10), office_calendar(), []) == 59


def test_spans_several_working_days():
    assert remaining_working_minutes(utc(MON, 9), utc(FRI, 17), office_calendar(), []) == 5 * 480


def test_overnight_shift_within_one_window():
    assert remaining_working_minutes(utc(MON, 23), utc(TUE, 5), night_calendar(), []) == 360


def test_overnight_shift_across_two_nights():
    assert remaining_working_minutes(utc(MON, 22), utc(WED, 6), night_calendar(), []) == 960


def test_overnight_shift_daytime_gap_fast_forwards_to_tonight():
    assert remaining_working_minutes(utc(MON, 12), utc(TUE, 0), night_calendar(), []) == 120


def test_overnight_morning_tail_continues_with_same_evening():
    # 03:00-06:00 tail, then Tuesday night 22:00 to Wednesday 03:00.
    assert remaining_working_minutes(utc(TUE, 3), utc(WED, 3), night_calendar(), []) == 180 + 300


def test_saturday_override_and_sunday_excluded():
    cal = office_calendar(
        working_days=[1, 2, 3, 4, 5, 6],
        start_time="10:00",
        end_time="19:00",
        saturday_start_time="10:00",
        saturday_end_time="15:00",
    )

    # Fri 18-19, Sat 10-15, Mon 10-11.
    assert remaining_working_minutes(utc(FRI, 18), utc(MON_NEXT, 11), cal, []) == 420


def test_saturday_without_override_uses_standard_window():
    cal = office_calendar(working_days=[1, 2, 3, 4, 5, 6])
    assert remaining_working_minutes(utc(SAT, 9), utc(SAT, 17), cal, []) == 480


def test_leave_overlap_is_subtracted():
    leave = LeaveRecord(start=utc(MON, 12), end=utc(MON, 13))
    assert remaining_working_minutes(utc(MON, 9), utc(MON, 17), office_calendar(), [leave]) == 420


def test_leave_covering_whole_window_never_goes_negative():
    leave = LeaveRecord(start=utc(MON, 8), end=utc(MON, 18))
    assert remaining_working_minutes(utc(MON, 9), utc(MON, 17), office_calendar(), [leave]) == 0


def test_full_day_leave_inside_multi_day_span():
    leave = LeaveRecord(start=utc(TUE, 0), end=utc(WED, 0))
    assert remaining_working_minutes(utc(MON, 9), utc(FRI, 17), office_calendar(), [leave]) == 4 * 480


def test_overlapping_leave_records_are_subtracted_independently():
    # The union is 12:00-15:00 (180 min) but each record is subtracted on its own.
    leaves = [
        LeaveRecord(start=utc(MON, 12), end=utc(MON, 14)),
        LeaveRecord(start=utc(MON, 13), end=utc(MON, 15)),
    ]
    assert remaining_working_minutes(utc(MON, 9), utc(MON, 17), office_calendar(), leaves) == 480 - 240


def test_no_working_days_returns_zero_for_long_spans():
    cal = office_calendar(working_days=[])
    far = utc(MON, 9) + timedelta(days=5 * 365)
    assert remaining_working_minutes(utc(MON, 9), far, cal, []) == 0


def test_iteration_cap_returns_partial_total():
    calc = WorkingTimeCalculator(max_iterations=2)
    assert calc.remaining_working_minutes(utc(MON, 9), utc(FRI, 17), office_calendar(), []) == 960


def test_overdue_is_remaining_with_arguments_swapped():
    cal = office_calendar()
    leaves = [LeaveRecord(start=utc(TUE, 10), end=utc(TUE, 11))]
    deadline, now = utc(MON, 15), utc(WED, 11)

    overdue = overdue_working_minutes(now, deadline, cal, leaves)

    assert overdue == remaining_working_minutes(deadline, now, cal, leaves)
    assert overdue == 120 + 420 + 120


def test_overdue_is_zero_before_deadline():
    assert overdue_working_minutes(utc(MON, 9), utc(MON, 10), office_calendar(), []) == 0
    assert overdue_working_minutes(utc(MON, 10), utc(MON, 10), office_calendar(), []) == 0


@pytest.mark.parametrize(
    "calendar",
    [
        office_calendar(working_days=[1, 2, 3, 4, 5, 6]),
        night_calendar(),
        night_calendar(working_days=[1, 2, 3, 4, 5, 6], saturday_start_time="23:00", saturday_end_time="07:00"),
        night_calendar(working_days=[1, 2, 3, 4, 5, 6], saturday_start_time="10:00", saturday_end_time="15:00"),
    ],
    ids=["office", "night", "night-longer-saturday", "night-daytime-saturday"],
)
def test_remaining_never_increases_as_now_advances(calendar):
    deadline = utc(MON_NEXT, 12)
    leaves = [LeaveRecord(start=utc(WED, 11), end=utc(WED, 23, 30))]

    previous = None
    now = utc(MON, 0)
    while now <= deadline:
        value = remaining_working_minutes(now, deadline, calendar, leaves)
        assert value >= 0
        if previous is not None:
            assert value <= previous
        previous = value
        now += timedelta(minutes=53)


def test_overnight_window_continues_into_longer_next_night():
    cal = night_calendar(working_days=[1, 2, 3, 4, 5, 6], saturday_start_time="23:00", saturday_end_time="07:00")
    deadline = datetime(2025, 1, 12, 2, 0, tzinfo=timezone.utc)  # Sunday

    # Fri 23:30-Sat 06:00, Saturday window 06:00-07:00, Sat 23:00-Sun 02:00.
    from_friday = remaining_working_minutes(utc(FRI, 23, 30), deadline, cal, [])
    from_midnight = remaining_working_minutes(utc(SAT, 0), deadline, cal, [])

    assert from_friday == 390 + 60 + 180
    assert from_midnight == 420 + 180
    assert from_friday >= from_midnight


def test_local_timezone_decides_the_shift():
    cal = office_calendar(timezone="Asia/Karachi")  # UTC+5

    assert remaining_working_minutes(utc(MON, 4), utc(MON, 12), cal, []) == 480
    assert remaining_working_minutes(utc(MON, 0), utc(MON, 6), cal, []) == 120


def test_injected_converter_replaces_timezone_database():
    calc = WorkingTimeCalculator(FixedOffsetConverter(hours=-5))
    cal = office_calendar(timezone="Office/Anywhere")

    # 14:00-22:00 UTC is 09:00-17:00 local.
    assert calc.remaining_working_minutes(utc(MON, 14), utc(MON, 22), cal, []) == 480


def test_unknown_timezone_fails_fast():
    with pytest.raises(ConfigurationError):
        remaining_working_minutes(utc(MON, 9), utc(MON, 17), office_calendar(timezone="Mars/Olympus"), [])



def test_unknown_timezone_fails_fast_even_with_nothing_to_count():
    cal = office_calendar(timezone="Mars/Olympus")

    with pytest.raises(ConfigurationError):
        remaining_working_minutes(utc(MON, 17), utc(MON, 9), cal, [])
    with pytest.raises(ConfigurationError):
        overdue_working_minutes(utc(MON, 9), utc(MON, 17), cal, [])


def test_inputs_are_not_mutated():
    leaves = [LeaveRecord(start=utc(MON, 12), end=utc(MON, 13))]
    snapshot = list(leaves)
    now, deadline = utc(MON, 9), utc(TUE, 17)

    remaining_working_minutes(now, deadline, office_calendar(), leaves)

    assert leaves == snapshot
    assert now == utc(MON, 9)
    assert deadline == utc(TUE, 17)


def test_naive_instants_are_read_as_utc():
    naive_now = datetime(2025, 1, MON, 9)
    naive_deadline = datetime(2025, 1, MON, 17)
    assert remaining_working_minutes(naive_now, naive_deadline, office_calendar(), []) == 480
