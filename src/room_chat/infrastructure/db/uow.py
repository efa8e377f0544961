from __future__ import annotations

from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator, Self

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from room_chat.application.exceptions import StoreUnavailableError
from room_chat.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from room_chat.infrastructure.db.repositories.participant import (
    ParticipantReaderRepo,
    ParticipantWriterRepo,
)


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.participants = ParticipantReaderRepo(session)
        self.participants_w = ParticipantWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@asynccontextmanager
async def uow_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[SqlAlchemyUoW]:
    """Open a session, yield a UoW over it, and surface connectivity failures."""
    try:
        async with session_factory() as session:
            async with SqlAlchemyUoW(session) as uow:
                yield uow
    except (OperationalError, InterfaceError) as exc:
        raise StoreUnavailableError("Message store is unreachable") from exc
