from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from room_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from room_chat.api.middleware.metrics import RequestTimingMiddleware
from room_chat.api.v1.routers import health, messages, participants, status
from room_chat.application.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from room_chat.application.ports.clock import SystemClock
from room_chat.config import settings
from room_chat.infrastructure.db.session import (
    create_engine,
    create_schema,
    create_session_factory,
)
from room_chat.infrastructure.db.uow import uow_scope
from room_chat.infrastructure.locks.redis_lock import RedisSweepLock, create_redis
from room_chat.workers.liveness_sweeper import LivenessSweeper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    if settings.DB_CREATE_SCHEMA:
        await create_schema(engine)
    logger.info("Database engine created")

    app.state.redis = create_redis(settings.REDIS_URL)

    sweeper: LivenessSweeper | None = None
    if settings.SWEEPER_ENABLED:
        session_factory = app.state.session_factory
        sweeper = LivenessSweeper(
            lambda: uow_scope(session_factory),
            app.state.clock,
            interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
            stale_after_seconds=settings.STALE_AFTER_SECONDS,
            lock=(
                RedisSweepLock(
                    app.state.redis,
                    settings.SWEEPER_LOCK_KEY,
                    settings.SWEEPER_LOCK_TTL_SECONDS,
                )
                if app.state.redis is not None
                else None
            ),
        )
        await sweeper.start()

    yield

    if sweeper is not None:
        await sweeper.stop()
    if app.state.redis is not None:
        await app.state.redis.aclose()
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Room Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.clock = SystemClock(ZoneInfo(settings.DISPLAY_TIMEZONE))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(participants.router)
    app.include_router(messages.router)
    app.include_router(status.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    # non-authors get 401 on this API
    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(UnauthorizedError)
    async def _unauthorized(_req: Request, exc: UnauthorizedError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    async def _store_unavailable(req: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Store unavailable during %s %s", req.method, req.url.path, exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    for exc_class in (StoreUnavailableError, OperationalError, InterfaceError):
        app.add_exception_handler(exc_class, _store_unavailable)
