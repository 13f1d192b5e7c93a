from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Task


class TaskRepository(Protocol):
    def get_by_id(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    def list_awaiting_acknowledgement(self) -> Sequence[Task]:
        """Assigned tasks with an ack deadline that are not flagged late yet."""

        raise NotImplementedError

    def mark_late_acknowledgement(self, task_id: str) -> bool:
        raise NotImplementedError
