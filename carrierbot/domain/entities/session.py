from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from carrierbot.domain.entities.dialogue_state import DialogueState


@dataclass(frozen=True)
class Session:
    id: str
    state: DialogueState = DialogueState.IDLE
    data: dict[str, Any] = field(default_factory=dict)
    last_activity: float | None = None
