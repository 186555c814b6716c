from abc import ABC, abstractmethod
from typing import Any

from carrierbot.domain.entities.dialogue_state import DialogueState
from carrierbot.domain.entities.session import Session


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, conversation_id: str) -> Session:
        """Return the session, creating an IDLE one on first access. Refreshes last_activity."""
        raise NotImplementedError

    @abstractmethod
    def set(self, conversation_id: str, state: DialogueState, data_patch: dict[str, Any] | None = None) -> Session:
        """Overwrite the state and merge data_patch into the session data."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, conversation_id: str) -> Session:
        """Replace the session with a fresh IDLE one with empty data."""
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, message_id: str) -> bool:
        """Record an inbound message id. Returns False if it was already seen."""
        raise NotImplementedError
