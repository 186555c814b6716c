from __future__ import annotations

import asyncio
import logging
import random
import re
from typing import Awaitable, Callable

from carrierbot.application.exceptions import GenerationError, GenerativeBackendError
from carrierbot.application.ports.generative_backend import GenerativeBackendPort

BACKOFF_BASE_SECONDS = 0.5
BACKOFF_JITTER = 0.25
BACKOFF_MIN_SECONDS = 0.25

RETRIABLE_CATEGORIES = {"overloaded", "rate_limited", "transient", "empty"}

_OVERLOADED = re.compile(r"503|overloaded|temporarily|unavailable", re.IGNORECASE)
_RATE_LIMITED = re.compile(r"429|rate|quota", re.IGNORECASE)
_TRANSIENT = re.compile(r"ECONNRESET|ETIMEDOUT|timeout|timed out|connection|fetch", re.IGNORECASE)


class EmptyGenerationError(GenerativeBackendError):
    category = "empty"


def classify_error(error: Exception) -> str:
    """Typed backend errors carry their category; anything else is sniffed from its message."""
    if isinstance(error, GenerativeBackendError):
        return error.category
    message = str(error)
    if _OVERLOADED.search(message):
        return "overloaded"
    if _RATE_LIMITED.search(message):
        return "rate_limited"
    if _TRANSIENT.search(message):
        return "transient"
    return "fatal"


def backoff_seconds(attempt: int, rng: random.Random | None = None) -> float:
    base = BACKOFF_BASE_SECONDS * (2 ** attempt)
    jitter = base * (rng or random).uniform(-BACKOFF_JITTER, BACKOFF_JITTER)
    return max(BACKOFF_MIN_SECONDS, base + jitter)


class GenerateTextUseCase:
    """
    Resilient wrapper around the generative backend.

    The first attempt uses the primary model; every later attempt uses the
    fallback model. Overload, rate-limit, transient-network and empty-response
    failures are retried with jittered exponential backoff until the attempt
    budget is spent. Other failures stop immediately.

    Raises:
        GenerationError: chained to the last backend failure.
    """

    def __init__(
        self,
        backend: GenerativeBackendPort,
        primary_model: str,
        fallback_model: str,
        max_attempts: int = 4,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._backend = backend
        self._primary_model = primary_model
        self._fallback_model = fallback_model
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._rng = rng
        self._logger = logging.getLogger(__name__)

    async def execute(self, prompt: str, attempts: int | None = None) -> str:
        budget = max(1, attempts or self._max_attempts)
        model = self._primary_model
        last_error: Exception | None = None

        for attempt in range(budget):
            if attempt >= 1:
                model = self._fallback_model
            try:
                text = (await self._backend.generate(prompt, model) or "").strip()
                if not text:
                    raise EmptyGenerationError("Empty response from model")
                return text
            except Exception as e:
                last_error = e
                category = classify_error(e)
                if category not in RETRIABLE_CATEGORIES:
                    self._logger.error(
                        "Generation failed (not retriable)",
                        extra={"model": model, "attempt": attempt, "error": str(e)},
                    )
                    raise GenerationError(f"Generation failed: {e}", last_error=e) from e
                if attempt < budget - 1:
                    delay = backoff_seconds(attempt, self._rng)
                    self._logger.warning(
                        "Generation attempt failed, retrying",
                        extra={"model": model, "attempt": attempt, "delay": round(delay, 3), "reason": category},
                    )
                    await self._sleep(delay)

        self._logger.error(
            "Generation attempts exhausted",
            extra={"model": model, "attempt": budget, "error": str(last_error)},
        )
        raise GenerationError(f"Generation failed after {budget} attempts: {last_error}", last_error=last_error) from last_error
