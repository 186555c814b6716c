from abc import ABC, abstractmethod


class AdminNotifierPort(ABC):
    @abstractmethod
    async def notify(self, text: str) -> bool:
        """Best-effort alert to the business admin. Never raises; returns delivery status."""
        raise NotImplementedError
