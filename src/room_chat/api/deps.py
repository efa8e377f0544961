"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Header, Request

from room_chat.application.exceptions import UnauthorizedError
from room_chat.application.ports.clock import Clock
from room_chat.infrastructure.db.uow import SqlAlchemyUoW, uow_scope


async def get_uow(request: Request) -> AsyncIterator[SqlAlchemyUoW]:
    async with uow_scope(request.app.state.session_factory) as uow:
        yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


ClockDep = Annotated[Clock, Depends(get_clock)]


# Identity travels in the "User" header; no session or token.
OptionalUser = Annotated[str | None, Header(alias="user")]


async def get_current_user(user: OptionalUser = None) -> str:
    if not user:
        raise UnauthorizedError("Missing User header")
    return user


CurrentUser = Annotated[str, Depends(get_current_user)]
