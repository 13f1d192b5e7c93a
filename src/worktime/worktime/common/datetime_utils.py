from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import ConfigurationError, ValidationError


def parse_hhmm(value: str) -> int:
    """Parse "HH:MM" (or "HH:MM:SS") into minutes since midnight."""
    parts = str(value).strip().split(":") if value is not None else []
    if len(parts) not in (2, 3):
        raise ConfigurationError(f"Invalid time string: {value!r} (expected HH:MM)")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        raise ConfigurationError(f"Invalid time string: {value!r} (expected HH:MM)")
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ConfigurationError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def to_hhmm(value: Any) -> Optional[str]:
    """Normalize a stored TIME value (time, timedelta or string) to "HH:MM"."""
    if value is None or value == "":
        return None

    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"

    if isinstance(value, timedelta):
        total_minutes = (int(value.total_seconds()) // 60) % MINUTES_PER_DAY
        return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"

    if isinstance(value, str):
        minutes = parse_hhmm(value)
        return f"{minutes // 60:02d}:{minutes % 60:02d}"

    raise ConfigurationError(f"Unsupported time value type: {type(value)!r}")


def parse_instant(value: Any) -> datetime:
    """Parse an ISO-8601 instant into an aware UTC datetime.

    Naive values are read as UTC, matching how the data store serializes
    timestamptz columns.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    return ensure_utc(parsed)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def now_utc() -> datetime:
    """Current time in UTC.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def at_minute(day: date, minute: int) -> datetime:
    """Naive wall-clock datetime for ``minute`` past midnight on ``day``."""
    return datetime.combine(day, time(minute // 60, minute % 60))


def format_minutes(minutes: float) -> str:
    total = int(minutes)
    return f"{total // 60}h {total % 60}m"


def overlap_minutes(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> float:
    """Length in minutes of the intersection of [start, end) and [other_start, other_end)."""
    overlap_start = max(start, other_start)
    overlap_end = min(end, other_end)
    if overlap_start >= overlap_end:
        return 0.0
    return (overlap_end - overlap_start).total_seconds() / 60
