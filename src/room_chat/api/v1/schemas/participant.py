from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from room_chat.application.policies.sanitizer import strip_markup
from room_chat.domain.entities.participant import Participant


class RegisterParticipantRequest(BaseModel):
    name: str

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def _sanitize_name(cls, value: str) -> str:
        value = strip_markup(value)
        if not value:
            raise ValueError("name must not be empty")
        return value


class RegisteredResponse(BaseModel):
    name: str


class ParticipantResponse(BaseModel):
    name: str
    last_status: int = Field(alias="lastStatus")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entity(cls, participant: Participant) -> ParticipantResponse:
        return cls(
            name=participant.name,
            last_status=int(participant.last_seen.timestamp() * 1000),
        )
