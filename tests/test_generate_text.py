"""
Tests for the resilient generation wrapper (model escalation, retry, backoff).
"""
from __future__ import annotations

import random

import pytest

from carrierbot.application.exceptions import (
    BackendOverloadedError,
    BackendRateLimitError,
    GenerationError,
    GenerativeBackendError,
)
from carrierbot.application.use_cases.generate_text import backoff_seconds, classify_error

from conftest import RecordingSleep, ScriptedBackend, make_invoker


@pytest.mark.asyncio
async def test_first_success_uses_primary_model():
    backend = ScriptedBackend("  hola  ")
    sleep = RecordingSleep()
    text = await make_invoker(backend, sleep).execute("prompt")
    assert text == "hola"
    assert backend.models == ["primary-model"]
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_switches_to_fallback_model_from_second_attempt():
    backend = ScriptedBackend(BackendOverloadedError("busy"), BackendRateLimitError("429"), "ok")
    text = await make_invoker(backend).execute("prompt")
    assert text == "ok"
    assert backend.models == ["primary-model", "fallback-model", "fallback-model"]


@pytest.mark.asyncio
async def test_exhausting_retries_raises_with_last_error():
    last = BackendOverloadedError("still overloaded")
    backend = ScriptedBackend(BackendRateLimitError("quota"), last)
    sleep = RecordingSleep()
    with pytest.raises(GenerationError) as excinfo:
        await make_invoker(backend, sleep).execute("prompt")
    assert excinfo.value.last_error is last
    assert excinfo.value.__cause__ is last
    assert backend.models == ["primary-model"] + ["fallback-model"] * 3
    assert len(sleep.delays) == 3


@pytest.mark.asyncio
async def test_non_retriable_error_stops_immediately():
    backend = ScriptedBackend(GenerativeBackendError("invalid request"), "never reached")
    sleep = RecordingSleep()
    with pytest.raises(GenerationError):
        await make_invoker(backend, sleep).execute("prompt")
    assert len(backend.calls) == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_blank_response_is_retried():
    backend = ScriptedBackend("   ", "", "texto")
    assert await make_invoker(backend).execute("prompt") == "texto"
    assert len(backend.calls) == 3


@pytest.mark.asyncio
async def test_attempt_budget_override():
    backend = ScriptedBackend(RuntimeError("ETIMEDOUT"))
    with pytest.raises(GenerationError):
        await make_invoker(backend).execute("prompt", attempts=2)
    assert len(backend.calls) == 2


@pytest.mark.parametrize(
    "error,expected",
    [
        (RuntimeError("503 Service Unavailable"), "overloaded"),
        (RuntimeError("model is overloaded"), "overloaded"),
        (RuntimeError("429 Too Many Requests"), "rate_limited"),
        (RuntimeError("quota exceeded"), "rate_limited"),
        (OSError("ECONNRESET"), "transient"),
        (RuntimeError("fetch failed"), "transient"),
        (ValueError("bad request body"), "fatal"),
        (BackendOverloadedError("x"), "overloaded"),
    ],
)
def test_classify_error(error, expected):
    assert classify_error(error) == expected


@pytest.mark.parametrize("attempt", range(4))
def test_backoff_stays_within_jitter_band(attempt):
    rng = random.Random(1234)
    base = 0.5 * 2 ** attempt
    for _ in range(50):
        delay = backoff_seconds(attempt, rng)
        assert max(0.25, base * 0.75) <= delay <= base * 1.25


def test_backoff_floor():
    class LowestJitter(random.Random):
        def uniform(self, a, b):
            return a

    assert backoff_seconds(0, LowestJitter()) == pytest.approx(0.375)
    assert backoff_seconds(0, LowestJitter()) >= 0.25
