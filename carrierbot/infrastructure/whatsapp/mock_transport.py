from __future__ import annotations

import logging
from pathlib import Path

from carrierbot.application.ports.chat_transport import ChatTransportPort


class MockChatTransport(ChatTransportPort):
    """Logs outbound messages and keeps them in `sent` as (conversation_id, text, media_path)."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, Path | None]] = []
        self._logger = logging.getLogger(__name__)

    async def send_text(self, conversation_id: str, text: str) -> None:
        self.sent.append((conversation_id, text, None))
        self._logger.info("Mock send to WhatsApp", extra={"conversation_id": conversation_id, "reply_text": text})

    async def send_media(self, conversation_id: str, media_path: Path, caption: str) -> None:
        self.sent.append((conversation_id, caption, media_path))
        self._logger.info(
            "Mock media send to WhatsApp",
            extra={"conversation_id": conversation_id, "reply_text": caption, "media": str(media_path)},
        )
