from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from room_chat.domain.value_objects.enums import MessageType
from room_chat.domain.value_objects.room import BROADCAST_RECIPIENT, clock_time


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    from_name: str
    to: str
    text: str
    type: str
    time: str
    created_at: datetime

    @property
    def is_broadcast(self) -> bool:
        return self.to == BROADCAST_RECIPIENT


def status_message(name: str, text: str, now: datetime) -> Message:
    """Build the synthetic entry/departure notice for ``name``."""
    return Message(
        id=uuid.uuid4(),
        from_name=name,
        to=BROADCAST_RECIPIENT,
        text=text,
        type=MessageType.STATUS,
        time=clock_time(now),
        created_at=now,
    )
