from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from ..common.datetime_utils import ensure_utc, parse_instant


@dataclass(frozen=True)
class LeaveRecord:
    """An approved absence of a developer, as absolute UTC instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "LeaveRecord":
        return cls(
            start=parse_instant(row["leave_start_datetime"]),
            end=parse_instant(row["leave_end_datetime"]),
        )
