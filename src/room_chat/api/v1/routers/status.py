from __future__ import annotations

from fastapi import APIRouter, Response

from room_chat.api.deps import ClockDep, OptionalUser, UoWDep
from room_chat.services import participant_service

router = APIRouter(tags=["participants"])


@router.post("/status")
async def heartbeat(uow: UoWDep, clock: ClockDep, user: OptionalUser = None) -> Response:
    await participant_service.heartbeat(user, uow, clock)
    return Response(status_code=200)
