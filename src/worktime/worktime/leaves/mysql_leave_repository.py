from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import ensure_utc
from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveRecord
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_approved(
        self,
        *,
        developer_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[LeaveRecord]:
        where = ["developer_id=%s", "status=%s"]
        params: list = [developer_id, LeaveStatus.APPROVED.value]
        if end is not None:
            where.append("leave_start_datetime <= %s")
            params.append(_to_db(end))
        if start is not None:
            where.append("leave_end_datetime >= %s")
            params.append(_to_db(start))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT leave_start_datetime, leave_end_datetime
                FROM leave_records
                WHERE {' AND '.join(where)}
                ORDER BY leave_start_datetime
                """,
                tuple(params),
            )
            return [LeaveRecord.from_record(r) for r in fetchall(cur)]


def _to_db(value: datetime) -> datetime:
    # DATETIME columns hold naive UTC.
    return ensure_utc(value).replace(tzinfo=None)
