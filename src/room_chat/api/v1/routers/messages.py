from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response

from room_chat.api.deps import ClockDep, CurrentUser, OptionalUser, UoWDep
from room_chat.api.v1.schemas.message import MessageResponse, SendMessageRequest
from room_chat.services import message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    user: CurrentUser,
    uow: UoWDep,
    limit: int | None = Query(None, ge=1),
) -> list[MessageResponse]:
    messages = await message_service.list_messages(user, limit, uow)
    return [MessageResponse.from_entity(m) for m in messages]


@router.post("", status_code=201)
async def send_message(
    body: SendMessageRequest,
    uow: UoWDep,
    clock: ClockDep,
    user: OptionalUser = None,
) -> Response:
    await message_service.send_message(user, body.to_draft(), uow, clock)
    return Response(status_code=201)


@router.put("/{message_id}", status_code=201)
async def update_message(
    message_id: UUID,
    body: SendMessageRequest,
    uow: UoWDep,
    user: OptionalUser = None,
) -> Response:
    await message_service.update_message(message_id, user, body.to_draft(), uow)
    return Response(status_code=201)


@router.delete("/{message_id}")
async def delete_message(
    message_id: UUID,
    uow: UoWDep,
    user: OptionalUser = None,
) -> Response:
    await message_service.delete_message(message_id, user, uow)
    return Response(status_code=200)
