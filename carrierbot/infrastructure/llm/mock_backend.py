from __future__ import annotations

import json
import logging

from carrierbot.application.ports.generative_backend import GenerativeBackendPort


class MockGenerativeBackend(GenerativeBackendPort):
    """Offline stand-in: answers temporal prompts with empty JSON and echoes anything else."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def generate(self, prompt: str, model: str) -> str:
        self._logger.info("Mock generation", extra={"model": model})
        if "FECHA" in prompt:
            return json.dumps({"isoDate": None, "readable": None})
        if "HORA" in prompt:
            return json.dumps({"isoTime": None, "readable": None})
        return f"[{model}] {prompt[-200:]}"
