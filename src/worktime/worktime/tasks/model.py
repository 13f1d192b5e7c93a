from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import ensure_utc, format_minutes, parse_instant
from ..core.enums import TaskStatus


@dataclass(frozen=True)
class Task:
    """Read-model of a portal task, limited to what deadline tracking needs."""

    task_id: str
    task_number: int
    title: str
    status: TaskStatus
    developer_id: Optional[str] = None
    project_manager_id: Optional[str] = None
    sla_deadline: Optional[datetime] = None
    ack_deadline: Optional[datetime] = None
    late_acknowledgement: bool = False

    def __post_init__(self) -> None:
        for name in ("sla_deadline", "ack_deadline"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, ensure_utc(value))

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "Task":
        sla_deadline = row.get("sla_deadline")
        ack_deadline = row.get("ack_deadline")
        return cls(
            task_id=str(row["id"]),
            task_number=int(row.get("task_number") or 0),
            title=row.get("title") or "",
            status=TaskStatus(row["status"]),
            developer_id=row.get("developer_id"),
            project_manager_id=row.get("project_manager_id"),
            sla_deadline=parse_instant(sla_deadline) if sla_deadline else None,
            ack_deadline=parse_instant(ack_deadline) if ack_deadline else None,
            late_acknowledgement=bool(row.get("late_acknowledgement")),
        )


@dataclass(frozen=True)
class SlaStatus:
    remaining_minutes: int
    overdue_minutes: int
    is_delayed: bool
    is_urgent: bool
    working_time: bool = True

    @property
    def label(self) -> str:
        if self.is_delayed:
            return f"{format_minutes(self.overdue_minutes)} overdue"
        return f"{format_minutes(self.remaining_minutes)} left"

    def to_dict(self) -> dict:
        return {
            "remaining_minutes": self.remaining_minutes,
            "overdue_minutes": self.overdue_minutes,
            "is_delayed": self.is_delayed,
            "is_urgent": self.is_urgent,
            "working_time": self.working_time,
            "label": self.label,
        }
