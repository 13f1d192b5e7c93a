from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import LeaveRecord


class LeaveRepository(Protocol):
    def list_approved(
        self,
        *,
        developer_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[LeaveRecord]:
        """Approved leave of a developer, optionally only leave overlapping [start, end]."""

        raise NotImplementedError
