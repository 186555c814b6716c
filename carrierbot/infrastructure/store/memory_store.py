from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable

from carrierbot.application.ports.session_store import SessionStorePort
from carrierbot.domain.entities.dialogue_state import DialogueState
from carrierbot.domain.entities.session import Session


class MemorySessionStore(SessionStorePort):
    """
    In-process session map keyed by conversation id.

    Entries never expire unless ttl_seconds is set, in which case a session
    idle for longer than the TTL is replaced by a fresh one on its next access.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        processed_limit: int = 1000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._sessions: dict[str, Session] = {}
        self._processed: dict[str, None] = {}
        self._ttl_seconds = ttl_seconds
        self._processed_limit = processed_limit
        self._clock = clock

    def get(self, conversation_id: str) -> Session:
        now = self._clock()
        session = self._sessions.get(conversation_id)
        if session is None or self._is_expired(session, now):
            session = Session(id=conversation_id)
        session = replace(session, last_activity=now)
        self._sessions[conversation_id] = session
        return session

    def set(self, conversation_id: str, state: DialogueState, data_patch: dict[str, Any] | None = None) -> Session:
        session = self.get(conversation_id)
        session = replace(session, state=state, data={**session.data, **(data_patch or {})})
        self._sessions[conversation_id] = session
        return session

    def reset(self, conversation_id: str) -> Session:
        session = Session(id=conversation_id, last_activity=self._clock())
        self._sessions[conversation_id] = session
        return session

    def mark_processed(self, message_id: str) -> bool:
        if message_id in self._processed:
            return False
        self._processed[message_id] = None
        if len(self._processed) > self._processed_limit:
            # dicts keep insertion order: drop the oldest id
            del self._processed[next(iter(self._processed))]
        return True

    def __len__(self) -> int:
        return len(self._sessions)

    def _is_expired(self, session: Session, now: float) -> bool:
        if self._ttl_seconds is None or session.last_activity is None:
            return False
        return now - session.last_activity > self._ttl_seconds
