from __future__ import annotations

import dataclasses
import logging
import uuid

from room_chat.application.dto.message import MessageDraft
from room_chat.application.exceptions import NotFoundError
from room_chat.application.policies.permissions import assert_author, assert_present
from room_chat.application.ports.clock import Clock
from room_chat.application.uow import UnitOfWork
from room_chat.domain.entities.message import Message
from room_chat.domain.value_objects.room import clock_time

logger = logging.getLogger(__name__)


async def send_message(
    sender: str | None,
    draft: MessageDraft,
    uow: UnitOfWork,
    clock: Clock,
) -> Message:
    """Append a chat message written by ``sender`` to the room log."""
    sender = await assert_present(sender, uow.participants)

    now = clock.now()
    msg = Message(
        id=uuid.uuid4(),
        from_name=sender,
        to=draft.to,
        text=draft.text,
        type=draft.type.value,
        time=clock_time(now),
        created_at=now,
    )
    await uow.messages_w.add(msg)
    await uow.commit()
    return msg


async def list_messages(
    viewer: str,
    limit: int | None,
    uow: UnitOfWork,
) -> list[Message]:
    if limit is None:
        return await uow.messages.list_visible(viewer)
    return await uow.messages.list_latest_public(viewer, limit)


async def get_message(message_id: uuid.UUID, uow: UnitOfWork) -> Message:
    msg = await uow.messages.get(message_id)
    if msg is None:
        raise NotFoundError("Message not found")
    return msg


async def update_message(
    message_id: uuid.UUID,
    editor: str | None,
    draft: MessageDraft,
    uow: UnitOfWork,
) -> Message:
    """Replace recipient, text and type of a message owned by ``editor``.

    id, author and time are kept.
    """
    await assert_present(editor, uow.participants)
    msg = assert_author(await uow.messages.get_for_update(message_id), editor)

    updated = dataclasses.replace(
        msg, to=draft.to, text=draft.text, type=draft.type.value,
    )
    await uow.messages_w.update(updated)
    await uow.commit()
    return updated


async def delete_message(
    message_id: uuid.UUID,
    requester: str | None,
    uow: UnitOfWork,
) -> None:
    msg = assert_author(await uow.messages.get_for_update(message_id), requester)
    await uow.messages_w.delete(msg.id)
    await uow.commit()
    logger.info("Message %s deleted by %s", msg.id, requester)
