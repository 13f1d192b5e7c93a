from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_TASK_COLUMNS = """
    id, task_number, title, status, developer_id, project_manager_id,
    sla_deadline, ack_deadline, late_acknowledgement
"""


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id=%s AND is_deleted=0",
                (task_id,),
            )
            r = fetchone(cur)
            return Task.from_record(r) if r else None

    def list_awaiting_acknowledgement(self) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TASK_COLUMNS}
                FROM tasks
                WHERE status=%s
                  AND late_acknowledgement=0
                  AND ack_deadline IS NOT NULL
                  AND is_deleted=0
                ORDER BY ack_deadline
                """,
                (TaskStatus.ASSIGNED.value,),
            )
            return [Task.from_record(r) for r in fetchall(cur)]

    def mark_late_acknowledgement(self, task_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE tasks SET late_acknowledgement=1 WHERE id=%s AND late_acknowledgement=0",
                (task_id,),
            )
            return cur.rowcount > 0
