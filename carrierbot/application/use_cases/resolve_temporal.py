from __future__ import annotations

import json
import logging
import re
from datetime import date, timedelta
from typing import Any, Callable
from zoneinfo import ZoneInfo

from carrierbot.application.exceptions import GenerationError, LLMContractError
from carrierbot.application.use_cases.generate_text import GenerateTextUseCase
from carrierbot.application.utils.date_parser import (
    format_clock,
    parse_date_by_rules,
    parse_time_by_rules,
    today_in,
)
from carrierbot.application.utils.prompts import build_date_prompt, build_time_prompt
from carrierbot.domain.entities.temporal import ParsedDate, ParsedTime

FALLBACK_ATTEMPTS = 3

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})$")


class ResolveTemporalUseCase:
    """
    Turns free-form Spanish date/time text into calendar values.

    Deterministic rules run first; the generative model is only consulted when
    no rule applies, and only if an invoker was provided. Dates are never
    returned in the past relative to today in the configured timezone.
    """

    def __init__(
        self,
        timezone: ZoneInfo,
        invoker: GenerateTextUseCase | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._timezone = timezone
        self._invoker = invoker
        self._today = today or (lambda: today_in(timezone))
        self._logger = logging.getLogger(__name__)

    async def resolve_date(self, text: str) -> ParsedDate:
        today = self._today()
        parsed = parse_date_by_rules(text, today)
        if parsed is None:
            parsed = await self._date_from_model(text, today)
        if parsed.iso_date is not None and parsed.iso_date < today:
            return ParsedDate(iso_date=today + timedelta(days=1), readable="mañana")
        return parsed

    async def resolve_time(self, text: str) -> ParsedTime:
        parsed = parse_time_by_rules(text)
        if parsed is not None:
            return parsed
        return await self._time_from_model(text)

    async def _date_from_model(self, text: str, today: date) -> ParsedDate:
        if self._invoker is None or not (text or "").strip():
            return ParsedDate()
        prompt = build_date_prompt(text, str(self._timezone), today.isoformat())
        try:
            data = await self._ask_model(prompt)
            raw = data.get("isoDate")
            if not raw:
                return ParsedDate()
            iso_date = date.fromisoformat(str(raw))
        except (GenerationError, LLMContractError, ValueError) as e:
            self._logger.info("Date fallback gave no result", extra={"reason": str(e)})
            return ParsedDate()
        return ParsedDate(iso_date=iso_date, readable=_readable(data) or iso_date.isoformat())

    async def _time_from_model(self, text: str) -> ParsedTime:
        if self._invoker is None or not (text or "").strip():
            return ParsedTime()
        try:
            data = await self._ask_model(build_time_prompt(text))
        except (GenerationError, LLMContractError) as e:
            self._logger.info("Time fallback gave no result", extra={"reason": str(e)})
            return ParsedTime()
        match = _CLOCK.match(str(data.get("isoTime") or "").strip())
        if not match:
            return ParsedTime()
        iso_time = format_clock(int(match.group(1)), int(match.group(2)))
        if iso_time is None:
            return ParsedTime()
        return ParsedTime(iso_time=iso_time, readable=_readable(data) or iso_time)

    async def _ask_model(self, prompt: str) -> dict[str, Any]:
        text = await self._invoker.execute(prompt, attempts=FALLBACK_ATTEMPTS)
        return _parse_json_object(text)


def _parse_json_object(text: str) -> dict[str, Any]:
    cleaned = _CODE_FENCE.sub("", text).strip()
    try:
        data = json.loads(cleaned)
    except Exception:
        snippet = cleaned[:200].replace("\n", " ")
        raise LLMContractError(f"Temporal: invalid JSON. Snippet: {snippet!r}")
    if not isinstance(data, dict):
        raise LLMContractError("Temporal: expected a JSON object.")
    return data


def _readable(data: dict[str, Any]) -> str | None:
    value = data.get("readable")
    return str(value).strip() if value else None
