from __future__ import annotations

from pathlib import Path

from carrierbot.application.ports.chat_transport import ChatTransportPort
from carrierbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient


class WhatsAppTransport(ChatTransportPort):
    def __init__(self, client: WhatsAppClient) -> None:
        self._client = client

    async def send_text(self, conversation_id: str, text: str) -> None:
        await self._client.send_text(recipient_id=conversation_id, text=text)

    async def send_media(self, conversation_id: str, media_path: Path, caption: str) -> None:
        await self._client.send_image(recipient_id=conversation_id, image_path=media_path, caption=caption)
