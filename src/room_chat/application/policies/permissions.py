from __future__ import annotations

from room_chat.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from room_chat.application.repositories.participant import ParticipantReader
from room_chat.domain.entities.message import Message


async def assert_present(name: str | None, participants: ParticipantReader) -> str:
    """Raise unless ``name`` is a registered participant."""
    if not name or not await participants.exists(name):
        raise ValidationError("Sender is not a participant of the room")
    return name


def assert_author(message: Message | None, user: str | None) -> Message:
    """Raise if the message doesn't exist or ``user`` did not write it."""
    if message is None:
        raise NotFoundError("Message not found")
    if message.from_name != user:
        raise ForbiddenError("Only the author can change this message")
    return message
