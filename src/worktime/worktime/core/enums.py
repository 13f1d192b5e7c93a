from __future__ import annotations

from enum import Enum, IntEnum


class TaskStatus(str, Enum):
    """Task lifecycle states as stored by the portal."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    APPROVED = "approved"
    CANCELLED = "cancelled"


class LeaveStatus(str, Enum):
    """Approval state of a leave record. Only APPROVED leave affects working time."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TaskPriority(IntEnum):
    """Ordering used by the team overview (lower sorts first)."""

    SLA_OVERDUE = 1
    LATE_ACKNOWLEDGEMENT = 2
    APPROACHING_DEADLINE = 3
    AWAITING_ACKNOWLEDGEMENT = 4
    ACTIVE = 5


CLOSED_TASK_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.APPROVED, TaskStatus.CANCELLED})
