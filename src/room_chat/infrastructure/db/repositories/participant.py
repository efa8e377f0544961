from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from room_chat.domain.entities.participant import Participant
from room_chat.infrastructure.db.mappers import participant as mapper
from room_chat.infrastructure.db.models.participant import ParticipantModel


class ParticipantReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, name: str) -> bool:
        stmt = select(ParticipantModel.name).where(ParticipantModel.name == name).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_except(self, name: str) -> list[Participant]:
        stmt = (
            select(ParticipantModel)
            .where(ParticipantModel.name != name)
            .order_by(ParticipantModel.name.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_stale(self, cutoff: datetime) -> list[Participant]:
        stmt = (
            select(ParticipantModel)
            .where(ParticipantModel.last_seen <= cutoff)
            .order_by(ParticipantModel.last_seen.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ParticipantWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_if_absent(self, participant: Participant) -> bool:
        stmt = (
            pg_insert(ParticipantModel)
            .values(name=participant.name, last_seen=participant.last_seen)
            .on_conflict_do_nothing(index_elements=[ParticipantModel.name])
            .returning(ParticipantModel.name)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def touch(self, name: str, ts: datetime) -> bool:
        stmt = (
            update(ParticipantModel)
            .where(ParticipantModel.name == name)
            .values(last_seen=ts)
            .returning(ParticipantModel.name)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def remove_if_stale(self, name: str, cutoff: datetime) -> bool:
        stmt = (
            delete(ParticipantModel)
            .where(
                ParticipantModel.name == name,
                ParticipantModel.last_seen <= cutoff,
            )
            .returning(ParticipantModel.name)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None
