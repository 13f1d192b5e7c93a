from __future__ import annotations

from typing import Optional

from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decode_int_list, fetchone
from .model import CalendarConfig
from .repository import CalendarRepository


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_developer(self, developer_id: str) -> Optional[CalendarConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.id AS developer_id, c.id AS calendar_id,
                       c.working_days, c.start_time, c.end_time,
                       c.saturday_start_time, c.saturday_end_time, c.timezone
                FROM developers d
                LEFT JOIN availability_calendars c ON c.id = d.availability_calendar_id
                WHERE d.id=%s
                """,
                (developer_id,),
            )
            r = fetchone(cur)
            if not r:
                raise NotFoundError("Developer not found")
            if r.get("calendar_id") is None:
                return None
            return CalendarConfig.from_record({**r, "working_days": decode_int_list(r.get("working_days"))})
