"""
Tests for the rule cascade that reads Spanish dates and times.
"""
from __future__ import annotations

from datetime import date, timedelta

import pytest

from carrierbot.application.utils.date_parser import parse_date_by_rules, parse_time_by_rules
from carrierbot.application.utils.message_rules import confirmation

BASE = date(2025, 1, 10)  # Friday


def _iso(text: str, today: date = BASE) -> str | None:
    parsed = parse_date_by_rules(text, today)
    return parsed.iso_date.isoformat() if parsed else None


def test_numeric_date_later_this_year_keeps_year():
    assert _iso("17/08", date(2025, 1, 10)) == "2025-08-17"


def test_numeric_date_already_past_rolls_to_next_year():
    assert _iso("17/08", date(2025, 9, 1)) == "2026-08-17"


def test_roll_forward_happens_exactly_once():
    assert _iso("09/01", BASE) == "2026-01-09"
    assert _iso("9 de enero", BASE) == "2026-01-09"


def test_numeric_date_with_dashes_and_year():
    parsed = parse_date_by_rules("el 17-08-2026 por favor", BASE)
    assert parsed.iso_date == date(2026, 8, 17)
    assert parsed.readable == "17/8/2026"


def test_written_date():
    parsed = parse_date_by_rules("17 de agosto", date(2025, 9, 1))
    assert parsed.iso_date == date(2026, 8, 17)
    assert parsed.readable == "17 de agosto"
    assert _iso("3 de setiembre de 2027") == "2027-09-03"


def test_relative_words():
    assert _iso("hoy") == "2025-01-10"
    assert _iso("Mañana en la tarde") == "2025-01-11"
    assert _iso("manana") == "2025-01-11"
    assert _iso("pasado mañana") == "2025-01-12"


def test_weekday_qualifiers():
    assert _iso("el próximo jueves") == "2025-01-16"
    assert _iso("este lunes") == "2025-01-13"
    assert _iso("esta miércoles") == "2025-01-15"


def test_same_weekday_is_pushed_a_week():
    assert _iso("este viernes") == "2025-01-17"
    assert _iso("proximo viernes") == "2025-01-17"


def test_impossible_calendar_date_does_not_match():
    assert parse_date_by_rules("31/02", BASE) is None


def test_unrecognised_text():
    assert parse_date_by_rules("cuando puedas", BASE) is None
    assert parse_date_by_rules("", BASE) is None


@pytest.mark.parametrize("offset", range(0, 366, 17))
@pytest.mark.parametrize(
    "text",
    ["hoy", "mañana", "pasado mañana", "próximo lunes", "este domingo", "esta sábado", "proximo miercoles"],
)
def test_relative_rules_never_return_past_dates(text, offset):
    today = BASE + timedelta(days=offset)
    parsed = parse_date_by_rules(text, today)
    assert parsed is not None
    assert parsed.iso_date >= today


def test_bare_hour_three_is_afternoon():
    assert parse_time_by_rules("3").iso_time == "15:00"


@pytest.mark.parametrize("hour", range(1, 12))
def test_bare_morning_hours_shift_to_afternoon(hour):
    assert parse_time_by_rules(str(hour)).iso_time == f"{hour + 12:02d}:00"


@pytest.mark.parametrize("hour", [0, *range(12, 24)])
def test_bare_hours_outside_one_to_eleven_are_literal(hour):
    assert parse_time_by_rules(f"a las {hour}").iso_time == f"{hour:02d}:00"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("12am", "00:00"),
        ("12 pm", "12:00"),
        ("3 pm", "15:00"),
        ("3:30pm", "15:30"),
        ("3 p.m.", "15:00"),
        ("9:05 am", "09:05"),
        ("15:45", "15:45"),
        ("mediodía", "12:00"),
        ("medio dia", "12:00"),
        ("medianoche", "00:00"),
    ],
)
def test_time_rules(text, expected):
    assert parse_time_by_rules(text).iso_time == expected


@pytest.mark.parametrize("text", ["25:10", "13 pm", "10:75", "24", "hola"])
def test_out_of_range_or_unknown_times_have_no_value(text):
    assert parse_time_by_rules(text) is None


@pytest.mark.parametrize(
    "text,expected",
    [("sí", True), ("ok, correcto", True), ("no", False), ("equivocado", False), ("no es correcto", None), ("tal vez", None)],
)
def test_confirmation(text, expected):
    assert confirmation(text) is expected
