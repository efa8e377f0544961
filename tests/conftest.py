"""Shared test fixtures."""
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator
from uuid import UUID

import pytest

from room_chat.application.policies.visibility import (
    latest_public_messages,
    visible_messages,
)
from room_chat.domain.entities.message import Message
from room_chat.domain.entities.participant import Participant
from room_chat.domain.value_objects.enums import MessageType
from room_chat.domain.value_objects.room import BROADCAST_RECIPIENT, clock_time

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@dataclass
class FakeClock:
    current: datetime = T0

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_message(
    *,
    from_name: str = "Ana",
    to: str = BROADCAST_RECIPIENT,
    text: str = "hello",
    type: str = MessageType.MESSAGE,
    created_at: datetime = T0,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        from_name=from_name,
        to=to,
        text=text,
        type=type,
        time=clock_time(created_at),
        created_at=created_at,
    )


@dataclass
class FakeParticipantReader:
    _store: dict[str, Participant] = field(default_factory=dict)

    async def exists(self, name: str) -> bool:
        return name in self._store

    async def list_except(self, name: str) -> list[Participant]:
        return sorted(
            (p for p in self._store.values() if p.name != name),
            key=lambda p: p.name,
        )

    async def list_stale(self, cutoff: datetime) -> list[Participant]:
        return [p for p in self._store.values() if p.last_seen <= cutoff]


@dataclass
class FakeParticipantWriter:
    _reader: FakeParticipantReader

    async def add_if_absent(self, participant: Participant) -> bool:
        if participant.name in self._reader._store:
            return False
        self._reader._store[participant.name] = participant
        return True

    async def touch(self, name: str, ts: datetime) -> bool:
        if name not in self._reader._store:
            return False
        self._reader._store[name] = Participant(name=name, last_seen=ts)
        return True

    async def remove_if_stale(self, name: str, cutoff: datetime) -> bool:
        participant = self._reader._store.get(name)
        if participant is None or participant.last_seen > cutoff:
            return False
        del self._reader._store[name]
        return True


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def get(self, message_id: UUID) -> Message | None:
        for m in self._messages:
            if m.id == message_id:
                return m
        return None

    async def get_for_update(self, message_id: UUID) -> Message | None:
        return await self.get(message_id)

    async def list_all(self) -> list[Message]:
        return list(self._messages)

    async def list_visible(self, viewer: str) -> list[Message]:
        return visible_messages(self._messages, viewer)

    async def list_latest_public(self, viewer: str, limit: int) -> list[Message]:
        return latest_public_messages(self._messages, viewer, limit)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def add(self, message: Message) -> None:
        self._reader._messages.append(message)

    async def update(self, message: Message) -> None:
        self._reader._messages = [
            message if m.id == message.id else m for m in self._reader._messages
        ]

    async def delete(self, message_id: UUID) -> None:
        self._reader._messages = [
            m for m in self._reader._messages if m.id != message_id
        ]


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    participants: FakeParticipantReader = field(default_factory=FakeParticipantReader)
    participants_w: FakeParticipantWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    commits: int = 0
    rollbacks: int = 0

    def __post_init__(self) -> None:
        if self.participants_w is None:
            self.participants_w = FakeParticipantWriter(self.participants)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    def add_participant(self, name: str, last_seen: datetime = T0) -> Participant:
        participant = Participant(name=name, last_seen=last_seen)
        self.participants._store[name] = participant
        return participant

    def add_message(self, message: Message) -> Message:
        self.messages._messages.append(message)
        return message

    def factory(self):
        """Zero-arg callable yielding this UoW, shaped like uow_scope."""

        @asynccontextmanager
        async def _scope() -> AsyncIterator[FakeUoW]:
            yield self

        return _scope


@pytest.fixture
def uow() -> FakeUoW:
    return FakeUoW()
