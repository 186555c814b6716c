from __future__ import annotations

import logging
from pathlib import Path

from carrierbot.application.ports.chat_transport import ChatTransportPort
from carrierbot.application.utils.message_rules import truncate_text


class SendReplyUseCase:
    def __init__(self, transport: ChatTransportPort, auto_reply_enabled: bool = True, max_chars: int = 4000) -> None:
        self._transport = transport
        self._auto_reply_enabled = auto_reply_enabled
        self._max_chars = max_chars
        self._logger = logging.getLogger(__name__)

    async def execute(self, conversation_id: str, text: str) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped."""
        text = truncate_text(text, self._max_chars)
        if not self._auto_reply_enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"conversation_id": conversation_id, "reply_text": text})
            return False
        await self._transport.send_text(conversation_id, text)
        return True

    async def execute_media(self, conversation_id: str, media_path: Path | None, caption: str) -> bool:
        """Send media with caption; degrades to plain text when the media cannot be sent."""
        caption = truncate_text(caption, self._max_chars)
        if media_path is None or not self._auto_reply_enabled:
            return await self.execute(conversation_id, caption)
        try:
            await self._transport.send_media(conversation_id, media_path, caption)
            return True
        except Exception as e:
            self._logger.warning(
                "Media send failed, falling back to text",
                extra={"conversation_id": conversation_id, "error": str(e)},
            )
            return await self.execute(conversation_id, caption)
