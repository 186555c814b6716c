from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from carrierbot.application.ports.calendar import CalendarPort


@dataclass(frozen=True)
class BookedSlot:
    event_id: str
    summary: str
    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and self.start < end


class MockCalendar(CalendarPort):
    """In-process calendar for dev/local runs. Touching intervals do not conflict."""

    def __init__(self) -> None:
        self.bookings: list[BookedSlot] = []
        self._logger = logging.getLogger(__name__)

    async def is_slot_free(self, start: datetime, end: datetime) -> bool:
        return not any(slot.overlaps(start, end) for slot in self.bookings)

    async def create_event(
        self,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
    ) -> str:
        slot = BookedSlot(event_id=f"mock-{len(self.bookings) + 1:04d}", summary=summary, start=start, end=end)
        self.bookings.append(slot)
        self._logger.info("Mock calendar event created", extra={"event_id": slot.event_id})
        return slot.event_id
