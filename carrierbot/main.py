import logging

from fastapi import FastAPI

from carrierbot.api.webhooks import router as webhooks_router
from carrierbot.core.config import settings

LOG_CONTEXT_KEYS = (
    "message_id",
    "conversation_id",
    "state",
    "model",
    "attempt",
    "delay",
    "event_id",
    "reason",
    "error",
)


class ContextFormatter(logging.Formatter):
    """Appends the structured `extra` fields the use cases attach, as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in LOG_CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(pairs)}" if pairs else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    application = FastAPI(title=f"{settings.BUSINESS_NAME} WhatsApp Assistant", version="1.0.0")
    application.include_router(webhooks_router, tags=["webhooks"])

    @application.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "business": settings.BUSINESS_NAME}

    return application


app = create_app()
