from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from carrierbot.application.exceptions import (
    BackendOverloadedError,
    BackendRateLimitError,
    BackendTransientError,
    GenerativeBackendError,
)
from carrierbot.infrastructure.llm.openai_backend import OpenAIBackend

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class FakeCompletions:
    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _client(outcome) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(outcome)))


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.mark.asyncio
async def test_returns_stripped_content_for_requested_model():
    client = _client(_completion("  Hola desde el modelo \n"))
    backend = OpenAIBackend(client=client, temperature=0.1)

    assert await backend.generate("di hola", "fallback-model") == "Hola desde el modelo"
    kwargs = client.chat.completions.kwargs
    assert kwargs["model"] == "fallback-model"
    assert kwargs["messages"] == [{"role": "user", "content": "di hola"}]
    assert kwargs["temperature"] == 0.1


@pytest.mark.asyncio
async def test_missing_content_is_empty_text():
    backend = OpenAIBackend(client=_client(_completion(None)), temperature=0.0)
    assert await backend.generate("x", "m") == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,expected",
    [
        (openai.RateLimitError("slow down", response=httpx.Response(429, request=_REQUEST), body=None), BackendRateLimitError),
        (openai.InternalServerError("overloaded", response=httpx.Response(503, request=_REQUEST), body=None), BackendOverloadedError),
        (openai.APITimeoutError(request=_REQUEST), BackendTransientError),
        (openai.APIConnectionError(request=_REQUEST), BackendTransientError),
        (openai.BadRequestError("bad", response=httpx.Response(400, request=_REQUEST), body=None), GenerativeBackendError),
    ],
)
async def test_provider_errors_are_mapped(error, expected):
    backend = OpenAIBackend(client=_client(error), temperature=0.0)
    with pytest.raises(expected) as excinfo:
        await backend.generate("x", "m")
    assert type(excinfo.value) is expected
    assert excinfo.value.__cause__ is error
