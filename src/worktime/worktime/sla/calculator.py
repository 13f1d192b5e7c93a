from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..calendars.model import CalendarConfig, shift_window_for
from ..common.datetime_utils import at_minute, ensure_utc, minute_of_day, overlap_minutes
from ..core.constants import MAX_SLA_ITERATIONS, SATURDAY
from ..core.exceptions import ConfigurationError, SlaCalculationError
from ..leaves.model import LeaveRecord
from ..working_time.timezone import LocalTimeConverter, ZoneInfoConverter

logger = logging.getLogger(__name__)


class SlaDeadlineCalculator:
    """Finds the instant at which a budget of working minutes runs out.

    Only same-day shift windows are supported here; overnight calendars are
    rejected rather than producing a wrong deadline.
    """

    def __init__(
        self,
        converter: Optional[LocalTimeConverter] = None,
        *,
        max_iterations: int = MAX_SLA_ITERATIONS,
    ):
        self._converter = converter or ZoneInfoConverter()
        self._max_iterations = int(max_iterations)

    def calculate_deadline(
        self,
        start: datetime,
        sla_minutes: float,
        calendar: CalendarConfig,
        leaves: Iterable[LeaveRecord] = (),
    ) -> datetime:
        _require_same_day_windows(calendar)
        if sla_minutes <= 0:
            return ensure_utc(start)

        tz_name = calendar.timezone
        current = self._converter.to_local(start, tz_name)
        leave_windows = [
            (self._converter.to_local(leave.start, tz_name), self._converter.to_local(leave.end, tz_name))
            for leave in leaves
        ]

        remaining = float(sla_minutes)
        iterations = 0
        while remaining > 0 and iterations < self._max_iterations:
            iterations += 1
            day_of_week = current.isoweekday()

            if not calendar.is_working_day(day_of_week):
                current = calendar.shift_start_on(current.date() + timedelta(days=1))
                continue

            window = shift_window_for(day_of_week, calendar)
            minute = minute_of_day(current)
            if minute >= window.end:
                current = calendar.shift_start_on(current.date() + timedelta(days=1))
                continue

            effective_start = max(minute, window.start)
            day_start = at_minute(current.date(), effective_start)
            day_end = at_minute(current.date(), window.end)
            available = window.end - effective_start

            overlap = sum(overlap_minutes(day_start, day_end, ls, le) for ls, le in leave_windows)
            usable = max(0.0, available - overlap)

            if usable <= 0:
                current = calendar.shift_start_on(current.date() + timedelta(days=1))
                continue

            if remaining <= usable:
                if overlap == 0:
                    current = day_start + timedelta(minutes=remaining)
                else:
                    current = _walk_through_day(day_start, day_end, remaining, leave_windows)
                remaining = 0
            else:
                remaining -= usable
                current = calendar.shift_start_on(current.date() + timedelta(days=1))

        if remaining > 0:
            raise SlaCalculationError(
                f"SLA of {sla_minutes} working minutes not reached within {self._max_iterations} days"
            )

        deadline = self._converter.to_utc(current, tz_name)
        logger.debug("SLA deadline for start=%s minutes=%s: %s", start.isoformat(), sla_minutes, deadline.isoformat())
        return deadline


def _require_same_day_windows(calendar: CalendarConfig) -> None:
    windows = [calendar.standard_window]
    if calendar.is_working_day(SATURDAY):
        windows.append(calendar.saturday_window)
    for window in windows:
        if window.is_overnight:
            raise ConfigurationError("Invalid calendar: end_time must be after start_time")


def _walk_through_day(
    day_start: datetime,
    day_end: datetime,
    minutes: float,
    leave_windows: Sequence[tuple],
) -> datetime:
    """Step minute by minute, skipping leave, until ``minutes`` have been worked."""

    accumulated = 0
    cursor = day_start
    step = timedelta(minutes=1)
    while accumulated < minutes and cursor < day_end:
        on_leave = any(ls <= cursor < le for ls, le in leave_windows)
        if not on_leave:
            accumulated += 1
            if accumulated >= minutes:
                return cursor + step
        cursor += step
    return cursor
