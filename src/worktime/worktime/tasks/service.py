from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..calendars.model import CalendarConfig
from ..calendars.repository import CalendarRepository
from ..common.datetime_utils import ensure_utc, now_utc
from ..common.validators import require_non_empty
from ..core.constants import URGENT_THRESHOLD_MINUTES
from ..core.enums import CLOSED_TASK_STATUSES, TaskPriority, TaskStatus
from ..core.exceptions import DomainError, NotFoundError
from ..leaves.model import LeaveRecord
from ..leaves.repository import LeaveRepository
from ..working_time.calculator import WorkingTimeCalculator
from .model import SlaStatus, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

WorkingContext = Tuple[Optional[CalendarConfig], Sequence[LeaveRecord]]


class TaskDeadlineService:
    """Delay status, triage priority and late-acknowledgement checks for tasks."""

    def __init__(
        self,
        tasks: TaskRepository,
        calendars: CalendarRepository,
        leaves: LeaveRepository,
        *,
        calculator: Optional[WorkingTimeCalculator] = None,
        urgent_threshold_minutes: int = URGENT_THRESHOLD_MINUTES,
    ):
        self._tasks = tasks
        self._calendars = calendars
        self._leaves = leaves
        self._calculator = calculator or WorkingTimeCalculator()
        self._urgent_threshold = int(urgent_threshold_minutes)

    def _working_context(self, developer_id: Optional[str]) -> WorkingContext:
        if not developer_id:
            return None, ()
        try:
            calendar = self._calendars.get_for_developer(developer_id)
        except NotFoundError:
            logger.warning("Task developer %s no longer exists; using wall-clock time", developer_id)
            return None, ()
        if calendar is None:
            return None, ()
        return calendar, self._leaves.list_approved(developer_id=developer_id)

    def _cached_context(self) -> Callable[[Optional[str]], WorkingContext]:
        cache: Dict[Optional[str], WorkingContext] = {}

        def lookup(developer_id: Optional[str]) -> WorkingContext:
            if developer_id not in cache:
                cache[developer_id] = self._working_context(developer_id)
            return cache[developer_id]

        return lookup

    def get_task(self, task_id: str) -> Task:
        task = self._tasks.get_by_id(require_non_empty(task_id, "task_id"))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def sla_status(self, task: Task, *, now: Optional[datetime] = None) -> Optional[SlaStatus]:
        if task.sla_deadline is None:
            return None
        now = ensure_utc(now) if now else now_utc()
        calendar, leaves = self._working_context(task.developer_id)

        if calendar is None:
            # No calendar assigned: plain wall-clock minutes.
            seconds = (task.sla_deadline - now).total_seconds()
            if seconds > 0:
                return SlaStatus(int(seconds // 60), 0, is_delayed=False, is_urgent=False, working_time=False)
            return SlaStatus(0, int(-seconds // 60), is_delayed=True, is_urgent=False, working_time=False)

        if task.sla_deadline <= now:
            overdue = self._calculator.overdue_working_minutes(now, task.sla_deadline, calendar, leaves)
            return SlaStatus(0, overdue, is_delayed=overdue > 0, is_urgent=False)

        remaining = self._calculator.remaining_working_minutes(now, task.sla_deadline, calendar, leaves)
        return SlaStatus(
            remaining,
            0,
            is_delayed=False,
            is_urgent=0 < remaining < self._urgent_threshold,
        )

    def priority(self, task: Task, *, now: Optional[datetime] = None) -> TaskPriority:
        now = ensure_utc(now) if now else now_utc()
        return self._priority(task, now, self._working_context)

    def _priority(self, task: Task, now: datetime, lookup: Callable[[Optional[str]], WorkingContext]) -> TaskPriority:
        if task.sla_deadline and task.sla_deadline < now and task.status not in CLOSED_TASK_STATUSES:
            return TaskPriority.SLA_OVERDUE

        if _ack_is_late(task, now):
            return TaskPriority.LATE_ACKNOWLEDGEMENT

        if task.status == TaskStatus.IN_PROGRESS and task.sla_deadline and task.developer_id:
            calendar, leaves = lookup(task.developer_id)
            if calendar:
                remaining = self._calculator.remaining_working_minutes(now, task.sla_deadline, calendar, leaves)
                if 0 < remaining <= self._urgent_threshold:
                    return TaskPriority.APPROACHING_DEADLINE

        if task.status in (TaskStatus.ASSIGNED, TaskStatus.PENDING):
            return TaskPriority.AWAITING_ACKNOWLEDGEMENT
        return TaskPriority.ACTIVE

    def sort_active(self, tasks: Sequence[Task], *, now: Optional[datetime] = None) -> List[Task]:
        """Order tasks by priority; the most overdue SLA comes first within priority 1."""

        now = ensure_utc(now) if now else now_utc()
        lookup = self._cached_context()

        def overdue(task: Task) -> int:
            if not task.sla_deadline or not task.developer_id:
                return 0
            calendar, leaves = lookup(task.developer_id)
            if not calendar:
                return 0
            return self._calculator.overdue_working_minutes(now, task.sla_deadline, calendar, leaves)

        def sort_key(task: Task) -> tuple:
            priority = self._priority(task, now, lookup)
            if priority == TaskPriority.SLA_OVERDUE:
                return (priority, -overdue(task))
            return (priority, 0)

        return sorted(tasks, key=sort_key)

    def check_late_acknowledgements(self, *, now: Optional[datetime] = None) -> List[Task]:
        """Flag assigned tasks whose acknowledgement window has run out.

        A task is late when its ack deadline has passed on the wall clock,
        or when its developer has no working minutes left before it.
        Returns the tasks flagged by this run.
        """

        now = ensure_utc(now) if now else now_utc()
        candidates = self._tasks.list_awaiting_acknowledgement()
        if not candidates:
            logger.info("No assigned tasks to check")
            return []

        logger.info("Found %d assigned tasks to evaluate", len(candidates))
        lookup = self._cached_context()
        flagged: List[Task] = []

        for task in candidates:
            if task.status != TaskStatus.ASSIGNED or task.late_acknowledgement or task.ack_deadline is None:
                continue

            is_late = task.ack_deadline < now
            if is_late:
                logger.info("Task #%s: wall-clock ack deadline passed", task.task_number)
            elif task.developer_id:
                try:
                    calendar, leaves = lookup(task.developer_id)
                    if calendar is not None:
                        remaining = self._calculator.remaining_working_minutes(
                            now, task.ack_deadline, calendar, leaves
                        )
                        if remaining <= 0:
                            is_late = True
                            logger.info("Task #%s: working minutes exhausted (0 remaining)", task.task_number)
                except DomainError:
                    logger.exception("Error checking working minutes for task #%s", task.task_number)

            if not is_late:
                continue

            if self._tasks.mark_late_acknowledgement(task.task_id):
                flagged.append(replace(task, late_acknowledgement=True))
                logger.info("Flagged late acknowledgement for task #%s", task.task_number)

        return flagged


def _ack_is_late(task: Task, now: datetime) -> bool:
    if task.late_acknowledgement:
        return True
    return task.status == TaskStatus.ASSIGNED and task.ack_deadline is not None and task.ack_deadline < now
