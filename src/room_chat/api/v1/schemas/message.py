from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from room_chat.application.dto.message import MessageDraft
from room_chat.application.policies.sanitizer import strip_markup
from room_chat.domain.entities.message import Message
from room_chat.domain.value_objects.enums import MessageType


class SendMessageRequest(BaseModel):
    """Body of POST /messages and PUT /messages/{id}.

    ``status`` messages are produced by the server only.
    """

    to: str
    text: str
    type: Literal["message", "private_message"]

    model_config = ConfigDict(extra="forbid")

    @field_validator("to", "text")
    @classmethod
    def _sanitize(cls, value: str) -> str:
        value = strip_markup(value)
        if not value:
            raise ValueError("must not be empty")
        return value

    def to_draft(self) -> MessageDraft:
        return MessageDraft(to=self.to, text=self.text, type=MessageType(self.type))


class MessageResponse(BaseModel):
    id: UUID
    from_name: str = Field(alias="from")
    to: str
    text: str
    type: str
    time: str

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entity(cls, message: Message) -> MessageResponse:
        return cls(
            id=message.id,
            from_name=message.from_name,
            to=message.to,
            text=message.text,
            type=str(message.type),
            time=message.time,
        )
