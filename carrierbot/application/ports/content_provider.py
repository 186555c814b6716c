from abc import ABC, abstractmethod
from pathlib import Path


class ContentProviderPort(ABC):
    @abstractmethod
    async def get_pitch_text(self) -> str:
        """Marketing pitch about the company. Falls back to static text, never raises."""
        raise NotImplementedError

    @abstractmethod
    def get_company_image(self) -> Path | None:
        """Local path of the company image, or None when unavailable."""
        raise NotImplementedError
