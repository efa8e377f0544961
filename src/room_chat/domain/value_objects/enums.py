from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    MESSAGE = "message"
    PRIVATE_MESSAGE = "private_message"
    STATUS = "status"
