from __future__ import annotations

from typing import Protocol
from uuid import UUID

from room_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get(self, message_id: UUID) -> Message | None: ...

    async def get_for_update(self, message_id: UUID) -> Message | None:
        """Fetch and lock the row until the unit of work ends."""
        ...

    async def list_all(self) -> list[Message]:
        """Full log in insertion order, oldest first."""
        ...

    async def list_visible(self, viewer: str) -> list[Message]:
        """Messages addressed to the room or to ``viewer``, or written by ``viewer``."""
        ...

    async def list_latest_public(self, viewer: str, limit: int) -> list[Message]:
        """Last ``limit`` visible public-chat messages, oldest first."""
        ...


class MessageWriter(Protocol):
    async def add(self, message: Message) -> None: ...

    async def update(self, message: Message) -> None: ...

    async def delete(self, message_id: UUID) -> None: ...
