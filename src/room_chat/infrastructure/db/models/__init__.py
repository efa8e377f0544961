"""Import all models so Base.metadata knows every table."""
from room_chat.infrastructure.db.models.message import MessageModel
from room_chat.infrastructure.db.models.participant import ParticipantModel

__all__ = [
    "MessageModel",
    "ParticipantModel",
]
