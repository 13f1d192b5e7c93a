from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .calendars.mysql_calendar_repository import MySQLCalendarRepository
from .calendars.repository import CalendarRepository
from .core.constants import DEFAULT_ACK_WINDOW_MINUTES, URGENT_THRESHOLD_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .sla.calculator import SlaDeadlineCalculator
from .sla.service import SlaService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskDeadlineService
from .working_time.calculator import WorkingTimeCalculator
from .working_time.timezone import LocalTimeConverter, ZoneInfoConverter


@dataclass(frozen=True)
class Container:
    calendars_repo: CalendarRepository
    leaves_repo: LeaveRepository
    tasks_repo: TaskRepository

    working_time: WorkingTimeCalculator
    sla_service: SlaService
    task_deadline_service: TaskDeadlineService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    calendars_repo: CalendarRepository,
    leaves_repo: LeaveRepository,
    tasks_repo: TaskRepository,
    converter: Optional[LocalTimeConverter] = None,
    ack_window_minutes: int = DEFAULT_ACK_WINDOW_MINUTES,
    urgent_threshold_minutes: int = URGENT_THRESHOLD_MINUTES,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    converter = converter or ZoneInfoConverter()
    working_time = WorkingTimeCalculator(converter)

    sla_service = SlaService(
        calendars_repo,
        leaves_repo,
        calculator=SlaDeadlineCalculator(converter),
        ack_window_minutes=ack_window_minutes,
    )
    task_deadline_service = TaskDeadlineService(
        tasks_repo,
        calendars_repo,
        leaves_repo,
        calculator=working_time,
        urgent_threshold_minutes=urgent_threshold_minutes,
    )

    return Container(
        calendars_repo=calendars_repo,
        leaves_repo=leaves_repo,
        tasks_repo=tasks_repo,
        working_time=working_time,
        sla_service=sla_service,
        task_deadline_service=task_deadline_service,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    ack_window_minutes: int = DEFAULT_ACK_WINDOW_MINUTES,
    urgent_threshold_minutes: int = URGENT_THRESHOLD_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        calendars_repo=MySQLCalendarRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        ack_window_minutes=ack_window_minutes,
        urgent_threshold_minutes=urgent_threshold_minutes,
        conn=conn,
    )
