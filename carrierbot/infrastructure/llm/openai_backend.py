from __future__ import annotations

import openai
from openai import AsyncOpenAI

from carrierbot.application.exceptions import (
    BackendOverloadedError,
    BackendRateLimitError,
    BackendTransientError,
    GenerativeBackendError,
)
from carrierbot.application.ports.generative_backend import GenerativeBackendPort
from carrierbot.core.config import settings


class OpenAIBackend(GenerativeBackendPort):
    """
    OpenAI-backed adapter implementing GenerativeBackendPort.

    Raises:
        BackendOverloadedError: 5xx / service unavailable
        BackendRateLimitError: 429 / quota
        BackendTransientError: connection failures and timeouts
        GenerativeBackendError: any other provider error (not retried)
    """

    def __init__(self, client: AsyncOpenAI | None = None, temperature: float | None = None) -> None:
        self.client = client or AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.OPENAI_TIMEOUT_SECONDS)
        self._temperature = settings.OPENAI_TEMPERATURE if temperature is None else temperature

    async def generate(self, prompt: str, model: str) -> str:
        try:
            resp = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
                max_tokens=1400,
            )
        except openai.RateLimitError as e:
            raise BackendRateLimitError(f"OpenAI rate limited: {e}") from e
        except openai.InternalServerError as e:
            raise BackendOverloadedError(f"OpenAI unavailable: {e}") from e
        except (openai.APITimeoutError, openai.APIConnectionError) as e:
            raise BackendTransientError(f"OpenAI connection error: {e}") from e
        except openai.OpenAIError as e:
            raise GenerativeBackendError(f"OpenAI API error: {e}") from e

        return (resp.choices[0].message.content or "").strip() if resp.choices else ""
