from __future__ import annotations

from datetime import datetime
from typing import Protocol

from room_chat.domain.entities.participant import Participant


class ParticipantReader(Protocol):
    async def exists(self, name: str) -> bool: ...

    async def list_except(self, name: str) -> list[Participant]: ...

    async def list_stale(self, cutoff: datetime) -> list[Participant]:
        """Participants whose last_seen is at or before ``cutoff``."""
        ...


class ParticipantWriter(Protocol):
    async def add_if_absent(self, participant: Participant) -> bool:
        """Insert participant. Return False if the name is already taken."""
        ...

    async def touch(self, name: str, ts: datetime) -> bool: ...

    async def remove_if_stale(self, name: str, cutoff: datetime) -> bool:
        """Delete participant only while last_seen <= cutoff. Return True if deleted."""
        ...
