"""Working-minute arithmetic on a developer's weekly calendar.

The sweep walks day by day in the calendar's local wall-clock time,
counting only minutes inside that day's shift window, on working days,
outside approved leave. Timezone offsets are resolved once per call, when
the instants are converted; the day-stepping itself is naive local time.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..calendars.model import CalendarConfig, ShiftWindow, shift_window_for
from ..common.datetime_utils import at_minute, ensure_utc, minute_of_day, overlap_minutes
from ..core.constants import MAX_SWEEP_ITERATIONS
from ..leaves.model import LeaveRecord
from .timezone import LocalTimeConverter, ZoneInfoConverter

logger = logging.getLogger(__name__)


class WorkingTimeCalculator:
    def __init__(
        self,
        converter: Optional[LocalTimeConverter] = None,
        *,
        max_iterations: int = MAX_SWEEP_ITERATIONS,
    ):
        self._converter = converter or ZoneInfoConverter()
        self._max_iterations = int(max_iterations)

    def remaining_working_minutes(
        self,
        now: datetime,
        deadline: datetime,
        calendar: CalendarConfig,
        leaves: Iterable[LeaveRecord] = (),
    ) -> int:
        """Whole working minutes in [now, deadline), 0 when the deadline is not after now."""

        tz_name = calendar.timezone
        # Resolve the zone before the early return so a bad timezone always raises.
        current = self._converter.to_local(now, tz_name)
        deadline_local = self._converter.to_local(deadline, tz_name)
        if ensure_utc(deadline) <= ensure_utc(now):
            return 0

        leave_windows = [
            (self._converter.to_local(leave.start, tz_name), self._converter.to_local(leave.end, tz_name))
            for leave in leaves
        ]

        total = 0.0
        iterations = 0
        while current < deadline_local and iterations < self._max_iterations:
            iterations += 1
            day_of_week = current.isoweekday()

            if not calendar.is_working_day(day_of_week):
                current = _next_day_entry(current, calendar)
                continue

            window = shift_window_for(day_of_week, calendar)
            minute = minute_of_day(current)

            if not window.contains(minute):
                if minute < window.start:
                    current = at_minute(current.date(), window.start)
                    minute = window.start
                else:
                    current = _next_day_entry(current, calendar)
                    continue

            available = window.minutes_until_end(minute)
            window_end = _window_end(current, minute, window)
            effective_end = min(deadline_local, window_end)
            capped = max(0, int((effective_end - current).total_seconds() // 60))
            countable = min(available, capped)

            overlap = sum(overlap_minutes(current, effective_end, ls, le) for ls, le in leave_windows)
            total += max(0.0, countable - overlap)

            if deadline_local <= window_end:
                break

            if window.is_overnight and minute < window.start:
                # Counted the morning part of the window; tonight's part starts today.
                current = at_minute(current.date(), window.start)
            elif window.is_overnight:
                # Tomorrow's window may still be open at window_end.
                current = window_end
            else:
                current = _next_day_entry(current, calendar)
        else:
            if current < deadline_local:
                logger.warning(
                    "Working-time sweep stopped after %d iterations (tz=%s); returning partial total %d",
                    iterations,
                    tz_name,
                    int(total),
                )

        return int(total)

    def overdue_working_minutes(
        self,
        now: datetime,
        deadline: datetime,
        calendar: CalendarConfig,
        leaves: Iterable[LeaveRecord] = (),
    ) -> int:
        """Working minutes elapsed since ``deadline``: the same sweep with the arguments swapped."""

        return self.remaining_working_minutes(deadline, now, calendar, leaves)


_default_calculator = WorkingTimeCalculator()


def remaining_working_minutes(
    now: datetime,
    deadline: datetime,
    calendar: CalendarConfig,
    leaves: Iterable[LeaveRecord] = (),
) -> int:
    return _default_calculator.remaining_working_minutes(now, deadline, calendar, leaves)


def overdue_working_minutes(
    now: datetime,
    deadline: datetime,
    calendar: CalendarConfig,
    leaves: Iterable[LeaveRecord] = (),
) -> int:
    return _default_calculator.overdue_working_minutes(now, deadline, calendar, leaves)


def _next_day_entry(current: datetime, calendar: CalendarConfig) -> datetime:
    """First instant of the next calendar day that can hold working time."""
    next_day = current.date() + timedelta(days=1)
    if shift_window_for(next_day.isoweekday(), calendar).is_overnight:
        # The morning part of an overnight window begins at midnight.
        return at_minute(next_day, 0)
    return calendar.shift_start_on(next_day)


def _window_end(current: datetime, minute: int, window: ShiftWindow) -> datetime:
    if window.is_overnight and minute >= window.start:
        return at_minute(current.date() + timedelta(days=1), window.end)
    return at_minute(current.date(), window.end)

