from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import at_minute, parse_hhmm, to_hhmm
from ..core.constants import MINUTES_PER_DAY, SATURDAY
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class ShiftWindow:
    """One day's working window in minutes since midnight.

    A window is overnight when ``end <= start``: it runs from ``start`` to
    midnight and continues the next calendar day until ``end``.
    """

    start: int
    end: int

    @property
    def is_overnight(self) -> bool:
        return self.end <= self.start

    def contains(self, minute: int) -> bool:
        if self.is_overnight:
            return minute >= self.start or minute < self.end
        return self.start <= minute < self.end

    def minutes_until_end(self, minute: int) -> int:
        if not self.contains(minute):
            return 0
        if self.is_overnight and minute >= self.start:
            return (MINUTES_PER_DAY - minute) + self.end
        return self.end - minute


@dataclass(frozen=True)
class CalendarConfig:
    """Weekly availability calendar of a developer.

    ``working_days`` uses ISO weekdays (1=Monday .. 7=Sunday). Saturday
    times fall back to the standard window when not set.
    """

    working_days: frozenset
    start_time: str
    end_time: str
    timezone: str
    saturday_start_time: Optional[str] = None
    saturday_end_time: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "working_days", _normalize_working_days(self.working_days))
        for value in (self.start_time, self.end_time):
            parse_hhmm(value)
        for value in (self.saturday_start_time, self.saturday_end_time):
            if value:
                parse_hhmm(value)
        if not self.timezone or not str(self.timezone).strip():
            raise ConfigurationError("Calendar timezone is required")

    @property
    def standard_window(self) -> ShiftWindow:
        return ShiftWindow(parse_hhmm(self.start_time), parse_hhmm(self.end_time))

    @property
    def saturday_window(self) -> ShiftWindow:
        standard = self.standard_window
        start = parse_hhmm(self.saturday_start_time) if self.saturday_start_time else standard.start
        end = parse_hhmm(self.saturday_end_time) if self.saturday_end_time else standard.end
        return ShiftWindow(start, end)

    def is_working_day(self, day_of_week: int) -> bool:
        return day_of_week in self.working_days

    def shift_start_on(self, day: date) -> datetime:
        """Naive local datetime at which ``day``'s shift window opens."""
        return at_minute(day, shift_window_for(day.isoweekday(), self).start)

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "CalendarConfig":
        """Build from a data-store row (``availability_calendars`` columns)."""
        try:
            return cls(
                working_days=row.get("working_days") or (),
                start_time=to_hhmm(row["start_time"]),
                end_time=to_hhmm(row["end_time"]),
                timezone=str(row.get("timezone") or ""),
                saturday_start_time=to_hhmm(row.get("saturday_start_time")),
                saturday_end_time=to_hhmm(row.get("saturday_end_time")),
            )
        except KeyError as e:
            raise ConfigurationError(f"Calendar record is missing {e.args[0]!r}")


def shift_window_for(day_of_week: int, calendar: CalendarConfig) -> ShiftWindow:
    if day_of_week == SATURDAY:
        return calendar.saturday_window
    return calendar.standard_window


def _normalize_working_days(values: Iterable[Any]) -> frozenset:
    if isinstance(values, str):
        # MySQL stores the set as a comma separated string.
        values = [v for v in values.split(",") if v.strip()]

    days = set()
    for value in values:
        try:
            day = int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid working day: {value!r}")
        if isinstance(value, float) and value != day:
            raise ConfigurationError(f"Invalid working day: {value!r}")
        if not 1 <= day <= 7:
            raise ConfigurationError(f"Working day out of range (1-7): {value!r}")
        days.add(day)
    return frozenset(days)
