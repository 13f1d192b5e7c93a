from __future__ import annotations

from typing import Optional, Protocol

from .model import CalendarConfig


class CalendarRepository(Protocol):
    def get_for_developer(self, developer_id: str) -> Optional[CalendarConfig]:
        """Calendar assigned to a developer, or None when none is assigned.

        Raises NotFoundError when the developer does not exist.
        """

        raise NotImplementedError
