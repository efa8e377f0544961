from __future__ import annotations

from dataclasses import dataclass

from room_chat.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class MessageDraft:
    """Client-writable fields of a message."""

    to: str
    text: str
    type: MessageType = MessageType.MESSAGE
