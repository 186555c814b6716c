from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ParsedDate:
    iso_date: date | None = None
    readable: str | None = None

    @property
    def found(self) -> bool:
        return self.iso_date is not None


@dataclass(frozen=True)
class ParsedTime:
    iso_time: str | None = None  # HH:MM, 24h
    readable: str | None = None

    @property
    def found(self) -> bool:
        return self.iso_time is not None
