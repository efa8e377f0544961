from __future__ import annotations

import logging
from datetime import datetime

from room_chat.application.exceptions import ConflictError, NotFoundError
from room_chat.application.ports.clock import Clock
from room_chat.application.uow import UnitOfWork
from room_chat.domain.entities.message import status_message
from room_chat.domain.entities.participant import Participant
from room_chat.domain.value_objects.room import ENTERED_TEXT, LEFT_TEXT

logger = logging.getLogger(__name__)


async def register(name: str, uow: UnitOfWork, clock: Clock) -> Participant:
    """Add ``name`` to the room and announce the arrival.

    Raises ConflictError if someone with the same name is already present.
    """
    now = clock.now()
    participant = Participant(name=name, last_seen=now)

    if not await uow.participants_w.add_if_absent(participant):
        raise ConflictError("User already exists")

    await uow.messages_w.add(status_message(name, ENTERED_TEXT, now))
    await uow.commit()

    logger.info("Participant %s entered the room", name)
    return participant


async def heartbeat(name: str | None, uow: UnitOfWork, clock: Clock) -> None:
    if not name or not await uow.participants_w.touch(name, clock.now()):
        raise NotFoundError("Participant not found")
    await uow.commit()


async def list_others(viewer: str, uow: UnitOfWork) -> list[Participant]:
    return await uow.participants.list_except(viewer)


async def is_present(name: str, uow: UnitOfWork) -> bool:
    return await uow.participants.exists(name)


async def evict_if_stale(
    name: str,
    cutoff: datetime,
    uow: UnitOfWork,
    clock: Clock,
) -> bool:
    """Remove a stale participant and announce the departure in one commit.

    Returns False when the participant refreshed its heartbeat (or was
    already removed) since it was found stale.
    """
    if not await uow.participants_w.remove_if_stale(name, cutoff):
        await uow.rollback()
        return False

    await uow.messages_w.add(status_message(name, LEFT_TEXT, clock.now()))
    await uow.commit()
    return True
