from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from carrierbot.domain.entities.message import Message


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextBody(_Payload):
    body: str | None = None


class InboundMessage(_Payload):
    id: str | None = None
    sender: str | None = Field(None, alias="from")
    timestamp: int | None = None
    type: str | None = None
    text: TextBody | None = None

    def to_message(self) -> Message | None:
        """Domain message for a complete text message; None for media, reactions and partial payloads."""
        body = self.text.body if self.text else None
        if self.type != "text" or not (self.id and self.sender and body and self.timestamp):
            return None
        return Message(
            id=self.id,
            conversation_id=self.sender,
            text=body,
            timestamp=self.timestamp,
            platform="whatsapp",
        )


class ChangeValue(_Payload):
    messages: list[InboundMessage] = Field(default_factory=list)


class Change(_Payload):
    field: str | None = None
    value: ChangeValue = Field(default_factory=ChangeValue)


class Entry(_Payload):
    id: str | None = None
    changes: list[Change] = Field(default_factory=list)


class WebhookEventDTO(_Payload):
    """WhatsApp Cloud API notification (`whatsapp_business_account` object)."""

    object: str | None = None
    entry: list[Entry] = Field(default_factory=list)

    def extract_messages(self) -> list[Message]:
        """Inbound text messages in delivery order. Status callbacks carry no `messages` and yield nothing."""
        messages: list[Message] = []
        for entry in self.entry:
            for change in entry.changes:
                for inbound in change.value.messages:
                    message = inbound.to_message()
                    if message is not None:
                        messages.append(message)
        return messages
