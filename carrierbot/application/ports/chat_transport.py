from abc import ABC, abstractmethod
from pathlib import Path


class ChatTransportPort(ABC):
    @abstractmethod
    async def send_text(self, conversation_id: str, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def send_media(self, conversation_id: str, media_path: Path, caption: str) -> None:
        raise NotImplementedError
