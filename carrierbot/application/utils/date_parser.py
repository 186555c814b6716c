from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from carrierbot.domain.entities.temporal import ParsedDate, ParsedTime

WEEKDAYS = {
    "lunes": 0,
    "martes": 1,
    "miercoles": 2,
    "miércoles": 2,
    "jueves": 3,
    "viernes": 4,
    "sabado": 5,
    "sábado": 5,
    "domingo": 6,
}

MONTHS = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "setiembre": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
}

_TODAY = re.compile(r"\bhoy\b")
_DAY_AFTER_TOMORROW = re.compile(r"\bpasado\s+ma[ñn]ana\b")
_TOMORROW = re.compile(r"\bma[ñn]ana\b")
_WEEKDAY = re.compile(r"\b(próximo|proximo|este|esta)\s+(" + "|".join(WEEKDAYS) + r")\b")
_NUMERIC_DATE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})(?:[/-](\d{4}))?\b")
_WRITTEN_DATE = re.compile(r"\b(\d{1,2})\s+de\s+(" + "|".join(MONTHS) + r")(?:\s+de\s+(\d{4}))?\b")

_MIDDAY = re.compile(r"\b(medio ?d[ií]a|mediod[ií]a)\b")
_MIDNIGHT = re.compile(r"\b(media ?noche|medianoche)\b")
_TWELVE_HOUR = re.compile(r"\b(\d{1,2})(?::(\d{1,2}))?\s*(am|pm)\b")
_TWENTY_FOUR_HOUR = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_BARE_HOUR = re.compile(r"\b(\d{1,2})\b")

DateMatcher = Callable[[str, date], "ParsedDate | None"]
TimeMatcher = Callable[[str], "ParsedTime | None"]


def today_in(timezone: ZoneInfo) -> date:
    return datetime.now(timezone).date()


def match_today(text: str, today: date) -> ParsedDate | None:
    if _TODAY.search(text):
        return ParsedDate(iso_date=today, readable="hoy")
    return None


def match_day_after_tomorrow(text: str, today: date) -> ParsedDate | None:
    if _DAY_AFTER_TOMORROW.search(text):
        return ParsedDate(iso_date=today + timedelta(days=2), readable="pasado mañana")
    return None


def match_tomorrow(text: str, today: date) -> ParsedDate | None:
    if _TOMORROW.search(text):
        return ParsedDate(iso_date=today + timedelta(days=1), readable="mañana")
    return None


def match_weekday(text: str, today: date) -> ParsedDate | None:
    """"próximo jueves" / "este lunes". Never resolves to today."""
    match = _WEEKDAY.search(text)
    if not match:
        return None
    qualifier, day_name = match.group(1), match.group(2)
    days_ahead = (WEEKDAYS[day_name] - today.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return ParsedDate(iso_date=today + timedelta(days=days_ahead), readable=f"{qualifier} {day_name}")


def match_numeric_date(text: str, today: date) -> ParsedDate | None:
    """dd/mm[/yyyy] or dd-mm[-yyyy]."""
    match = _NUMERIC_DATE.search(text)
    if not match:
        return None
    day, month = int(match.group(1)), int(match.group(2))
    explicit_year = int(match.group(3)) if match.group(3) else None
    resolved = _resolve_year(day, month, explicit_year, today)
    if resolved is None:
        return None
    readable = f"{day}/{month}/{explicit_year}" if explicit_year else f"{day}/{month}"
    return ParsedDate(iso_date=resolved, readable=readable)


def match_written_date(text: str, today: date) -> ParsedDate | None:
    """"17 de agosto [de 2025]"."""
    match = _WRITTEN_DATE.search(text)
    if not match:
        return None
    day, month_name = int(match.group(1)), match.group(2)
    explicit_year = int(match.group(3)) if match.group(3) else None
    resolved = _resolve_year(day, MONTHS[month_name], explicit_year, today)
    if resolved is None:
        return None
    readable = f"{day} de {month_name}" + (f" de {explicit_year}" if explicit_year else "")
    return ParsedDate(iso_date=resolved, readable=readable)


DATE_MATCHERS: tuple[DateMatcher, ...] = (
    match_today,
    match_day_after_tomorrow,
    match_tomorrow,
    match_weekday,
    match_numeric_date,
    match_written_date,
)


def parse_date_by_rules(text: str, today: date) -> ParsedDate | None:
    """Run the date matchers in priority order. Returns None when no rule applies."""
    normalized = (text or "").lower().strip()
    if not normalized:
        return None
    for matcher in DATE_MATCHERS:
        parsed = matcher(normalized, today)
        if parsed is not None:
            return parsed
    return None


def _resolve_year(day: int, month: int, explicit_year: int | None, today: date) -> date | None:
    year = explicit_year if explicit_year is not None else today.year
    try:
        candidate = date(year, month, day)
        if explicit_year is None and candidate < today:
            candidate = date(year + 1, month, day)
    except ValueError:
        return None
    return candidate


def normalize_time_text(text: str) -> str:
    return " ".join((text or "").lower().split()).replace(".", "")


def match_named_time(text: str) -> ParsedTime | None:
    if _MIDDAY.search(text):
        return ParsedTime(iso_time="12:00", readable="mediodía")
    if _MIDNIGHT.search(text):
        return ParsedTime(iso_time="00:00", readable="medianoche")
    return None


def match_twelve_hour(text: str) -> ParsedTime | None:
    match = _TWELVE_HOUR.search(text)
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    suffix = match.group(3)
    if hour == 12 and suffix == "am":
        hour = 0
    elif hour != 12 and suffix == "pm":
        hour += 12
    return _clock_time(hour, minute)


def match_twenty_four_hour(text: str) -> ParsedTime | None:
    match = _TWENTY_FOUR_HOUR.search(text)
    if not match:
        return None
    return _clock_time(int(match.group(1)), int(match.group(2)))


def match_bare_hour(text: str) -> ParsedTime | None:
    """A lone hour. 1-11 are read as afternoon hours (business-hours bias)."""
    match = _BARE_HOUR.search(text)
    if not match:
        return None
    hour = int(match.group(1))
    if 1 <= hour <= 11:
        hour += 12
    return _clock_time(hour, 0)


TIME_MATCHERS: tuple[TimeMatcher, ...] = (
    match_named_time,
    match_twelve_hour,
    match_twenty_four_hour,
    match_bare_hour,
)


def parse_time_by_rules(text: str) -> ParsedTime | None:
    """
    Run the time matchers in priority order.

    The first matcher whose pattern applies decides: an out-of-range value
    (e.g. "25:10") yields None rather than falling through to a looser rule.
    """
    normalized = normalize_time_text(text)
    if not normalized:
        return None
    for matcher in TIME_MATCHERS:
        parsed = matcher(normalized)
        if parsed is not None:
            return parsed if parsed.found else None
    return None


def format_clock(hour: int, minute: int) -> str | None:
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return f"{hour:02d}:{minute:02d}"
    return None


def _clock_time(hour: int, minute: int) -> ParsedTime:
    # an empty ParsedTime marks "pattern matched but value out of range"
    iso_time = format_clock(hour, minute)
    return ParsedTime(iso_time=iso_time, readable=iso_time)
