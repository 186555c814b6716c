"""
Shared fakes for the dialogue, temporal and generation tests.
"""
from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from carrierbot.application.ports.admin_notifier import AdminNotifierPort
from carrierbot.application.ports.calendar import CalendarPort
from carrierbot.application.ports.content_provider import ContentProviderPort
from carrierbot.application.ports.generative_backend import GenerativeBackendPort
from carrierbot.application.use_cases.generate_text import GenerateTextUseCase
from carrierbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from carrierbot.application.use_cases.resolve_temporal import ResolveTemporalUseCase
from carrierbot.application.use_cases.send_reply import SendReplyUseCase
from carrierbot.infrastructure.store.memory_store import MemorySessionStore
from carrierbot.infrastructure.whatsapp.mock_transport import MockChatTransport

TZ = ZoneInfo("America/Mexico_City")
BASE_DATE = date(2025, 1, 10)  # a Friday


class ScriptedBackend(GenerativeBackendPort):
    """Returns (or raises) the scripted outcomes in order; repeats the last one."""

    def __init__(self, *outcomes: str | Exception) -> None:
        self.outcomes = list(outcomes) or [""]
        self.calls: list[tuple[str, str]] = []

    async def generate(self, prompt: str, model: str) -> str:
        self.calls.append((prompt, model))
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def models(self) -> list[str]:
        return [model for _, model in self.calls]


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeCalendar(CalendarPort):
    def __init__(self, free: bool = True, error: Exception | None = None) -> None:
        self.free = free
        self.error = error
        self.checked: list[tuple[datetime, datetime]] = []
        self.created: list[dict] = []

    async def is_slot_free(self, start: datetime, end: datetime) -> bool:
        self.checked.append((start, end))
        if self.error is not None:
            raise self.error
        return self.free

    async def create_event(self, summary: str, description: str, start: datetime, end: datetime) -> str:
        self.created.append({"summary": summary, "description": description, "start": start, "end": end})
        return "evt_123"


class FakeContent(ContentProviderPort):
    def __init__(self, pitch: str = "Somos la mejor opción.", image: Path | None = None) -> None:
        self.pitch = pitch
        self.image = image

    async def get_pitch_text(self) -> str:
        return self.pitch

    def get_company_image(self) -> Path | None:
        return self.image


class FakeNotifier(AdminNotifierPort):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.alerts: list[str] = []

    async def notify(self, text: str) -> bool:
        if self.error is not None:
            raise self.error
        self.alerts.append(text)
        return True


def make_invoker(backend: GenerativeBackendPort, sleep: RecordingSleep | None = None) -> GenerateTextUseCase:
    return GenerateTextUseCase(
        backend=backend,
        primary_model="primary-model",
        fallback_model="fallback-model",
        max_attempts=4,
        sleep=sleep or RecordingSleep(),
    )


@pytest.fixture
def backend() -> ScriptedBackend:
    return ScriptedBackend("respuesta del modelo")


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def transport() -> MockChatTransport:
    return MockChatTransport()


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def content() -> FakeContent:
    return FakeContent()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_engine(store, transport, calendar, content, notifier, backend):
    def _make(**overrides) -> HandleIncomingMessageUseCase:
        invoker = overrides.pop("generate_text", None) or make_invoker(backend)
        options = {
            "store": store,
            "resolver": ResolveTemporalUseCase(timezone=TZ, invoker=None, today=lambda: BASE_DATE),
            "generate_text": invoker,
            "calendar": calendar,
            "content": content,
            "notifier": notifier,
            "send_reply": SendReplyUseCase(transport=transport, max_chars=4000),
            "timezone": TZ,
            "business_name": "Ultracel",
            "allowed_amounts": [110, 160, 210],
            "appointment_minutes": 60,
            "debug_prefix": "gpt",
        }
        options.update(overrides)
        return HandleIncomingMessageUseCase(**options)

    return _make
