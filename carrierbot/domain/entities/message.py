from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    id: str
    conversation_id: str
    text: str
    timestamp: int
    platform: str
