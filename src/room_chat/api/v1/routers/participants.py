from __future__ import annotations

from fastapi import APIRouter

from room_chat.api.deps import ClockDep, CurrentUser, UoWDep
from room_chat.api.v1.schemas.participant import (
    ParticipantResponse,
    RegisteredResponse,
    RegisterParticipantRequest,
)
from room_chat.services import participant_service

router = APIRouter(prefix="/participants", tags=["participants"])


@router.post("", response_model=RegisteredResponse, status_code=201)
async def register_participant(
    body: RegisterParticipantRequest,
    uow: UoWDep,
    clock: ClockDep,
) -> RegisteredResponse:
    participant = await participant_service.register(body.name, uow, clock)
    return RegisteredResponse(name=participant.name)


@router.get("", response_model=list[ParticipantResponse])
async def list_participants(
    user: CurrentUser,
    uow: UoWDep,
) -> list[ParticipantResponse]:
    participants = await participant_service.list_others(user, uow)
    return [ParticipantResponse.from_entity(p) for p in participants]
