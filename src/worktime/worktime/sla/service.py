from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..calendars.repository import CalendarRepository
from ..common.datetime_utils import ensure_utc, now_utc
from ..common.validators import require_non_empty, require_non_negative_number
from ..core.constants import DEFAULT_ACK_WINDOW_MINUTES, DEFAULT_SLA_HOURS, LEAVE_LOOKAHEAD_DAYS
from ..core.exceptions import ValidationError
from ..leaves.repository import LeaveRepository
from .calculator import SlaDeadlineCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlaQuote:
    developer_id: str
    start: datetime
    sla_hours: float
    deadline: datetime

    def to_dict(self) -> dict:
        return {
            "developer_id": self.developer_id,
            "start_time": self.start.isoformat(),
            "sla_hours": self.sla_hours,
            "deadline": self.deadline.isoformat(),
        }


class SlaService:
    def __init__(
        self,
        calendars: CalendarRepository,
        leaves: LeaveRepository,
        *,
        calculator: Optional[SlaDeadlineCalculator] = None,
        ack_window_minutes: int = DEFAULT_ACK_WINDOW_MINUTES,
    ):
        self._calendars = calendars
        self._leaves = leaves
        self._calculator = calculator or SlaDeadlineCalculator()
        self._ack_window_minutes = int(ack_window_minutes)

    def deadline_for_developer(
        self,
        developer_id: str,
        *,
        start: Optional[datetime] = None,
        sla_hours: float = DEFAULT_SLA_HOURS,
    ) -> SlaQuote:
        developer_id = require_non_empty(developer_id, "developer_id")
        hours = require_non_negative_number(sla_hours, "sla_hours")
        start = ensure_utc(start) if start else now_utc()

        logger.info("Calculating SLA: developer=%s start=%s hours=%s", developer_id, start.isoformat(), hours)

        calendar = self._calendars.get_for_developer(developer_id)
        if calendar is None:
            raise ValidationError("Developer has no availability calendar")

        leaves = self._leaves.list_approved(
            developer_id=developer_id,
            start=start,
            end=start + timedelta(days=LEAVE_LOOKAHEAD_DAYS),
        )
        deadline = self._calculator.calculate_deadline(start, hours * 60, calendar, leaves)

        logger.info("SLA deadline calculated: developer=%s deadline=%s", developer_id, deadline.isoformat())
        return SlaQuote(developer_id=developer_id, start=start, sla_hours=hours, deadline=deadline)

    def ack_deadline_for_developer(self, developer_id: str, *, assigned_at: Optional[datetime] = None) -> SlaQuote:
        """Deadline for acknowledging a newly assigned task (a short SLA in working minutes)."""
        return self.deadline_for_developer(
            developer_id,
            start=assigned_at,
            sla_hours=self._ack_window_minutes / 60,
        )
