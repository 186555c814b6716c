from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class CalendarPort(ABC):
    @abstractmethod
    async def is_slot_free(self, start: datetime, end: datetime) -> bool:
        """Check if time slot is available."""
        raise NotImplementedError

    @abstractmethod
    async def create_event(
        self,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        """Create calendar event. Returns event_id."""
        raise NotImplementedError
