from __future__ import annotations

from room_chat.domain.entities.message import Message
from room_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        from_name=model.from_name,
        to=model.to_name,
        text=model.text,
        type=model.type,
        time=model.time,
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        from_name=entity.from_name,
        to_name=entity.to,
        text=entity.text,
        type=entity.type,
        time=entity.time,
        created_at=entity.created_at,
    )
