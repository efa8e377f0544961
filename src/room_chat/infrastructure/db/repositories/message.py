from __future__ import annotations

from uuid import UUID

from sqlalchemy import ColumnElement, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from room_chat.domain.entities.message import Message
from room_chat.domain.value_objects.enums import MessageType
from room_chat.domain.value_objects.room import BROADCAST_RECIPIENT
from room_chat.infrastructure.db.mappers import message as mapper
from room_chat.infrastructure.db.models.message import MessageModel


def _visible_to(viewer: str) -> ColumnElement[bool]:
    return or_(
        MessageModel.to_name.in_((BROADCAST_RECIPIENT, viewer)),
        MessageModel.from_name == viewer,
    )


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, message_id: UUID) -> Message | None:
        model = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(model) if model else None

    async def get_for_update(self, message_id: UUID) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(MessageModel.id == message_id)
            .with_for_update()
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_all(self) -> list[Message]:
        stmt = select(MessageModel).order_by(MessageModel.seq.asc())
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_visible(self, viewer: str) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(_visible_to(viewer))
            .order_by(MessageModel.seq.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_latest_public(self, viewer: str, limit: int) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                _visible_to(viewer),
                MessageModel.type == MessageType.MESSAGE.value,
            )
            .order_by(MessageModel.seq.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        # newest first from the query; callers expect chronological order
        return [mapper.model_to_entity(m) for m in reversed(result.scalars().all())]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, message: Message) -> None:
        self._session.add(mapper.entity_to_model(message))
        await self._session.flush()

    async def update(self, message: Message) -> None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message.id)
            .values(to_name=message.to, text=message.text, type=message.type)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def delete(self, message_id: UUID) -> None:
        stmt = (
            delete(MessageModel)
            .where(MessageModel.id == message_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
