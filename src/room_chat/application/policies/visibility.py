"""Which part of the room log a given participant may read.

The plain listing returns everything addressed to the room, to the viewer,
or written by the viewer, whatever its type. The limited listing used for
"latest N" polling only considers ``message`` (public chat) entries and
keeps the most recent ones.
"""
from __future__ import annotations

from collections.abc import Iterable

from room_chat.domain.entities.message import Message
from room_chat.domain.value_objects.enums import MessageType


def is_visible(message: Message, viewer: str) -> bool:
    return (
        message.is_broadcast
        or message.to == viewer
        or message.from_name == viewer
    )


def visible_messages(messages: Iterable[Message], viewer: str) -> list[Message]:
    """Every message ``viewer`` may read, in log order."""
    return [m for m in messages if is_visible(m, viewer)]


def latest_public_messages(
    messages: Iterable[Message],
    viewer: str,
    limit: int,
) -> list[Message]:
    """The last ``limit`` visible public-chat messages, oldest first."""
    if limit <= 0:
        return []
    matching = [
        m for m in messages
        if m.type == MessageType.MESSAGE and is_visible(m, viewer)
    ]
    return matching[-limit:]
