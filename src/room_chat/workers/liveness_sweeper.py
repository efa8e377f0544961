"""Liveness sweeper: evicts participants that stopped sending heartbeats."""
from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from zoneinfo import ZoneInfo

from room_chat.application.ports.clock import Clock, SystemClock
from room_chat.application.ports.lock import SweepLock
from room_chat.application.uow import UoWFactory
from room_chat.config import settings
from room_chat.infrastructure.db.session import create_engine, create_session_factory
from room_chat.infrastructure.db.uow import uow_scope
from room_chat.infrastructure.locks.redis_lock import RedisSweepLock, create_redis
from room_chat.log_config import configure_logging
from room_chat.services import participant_service

logger = logging.getLogger(__name__)


class LivenessSweeper:
    """Recurring task removing participants whose last heartbeat is too old.

    Each stale participant is evicted in its own unit of work, so a failure
    for one of them is logged and the rest of the tick still runs.
    """

    def __init__(
        self,
        uow_factory: UoWFactory,
        clock: Clock,
        *,
        interval_seconds: float,
        stale_after_seconds: float,
        lock: SweepLock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._interval = interval_seconds
        self._stale_after = timedelta(seconds=stale_after_seconds)
        self._lock = lock
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="liveness-sweeper")
        logger.info(
            "Liveness sweeper started (interval=%.1fs, stale_after=%.1fs)",
            self._interval,
            self._stale_after.total_seconds(),
        )

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Liveness sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.sweep_once()
            except Exception:
                logger.exception("Liveness sweep failed")

    async def sweep_once(self) -> list[str]:
        """Run one tick. Returns the names evicted by this tick."""
        if self._lock is not None and not await self._lock.acquire():
            logger.debug("Another replica holds the sweep lock, skipping tick")
            return []
        try:
            return await self._evict_stale()
        finally:
            if self._lock is not None:
                await self._lock.release()

    async def _evict_stale(self) -> list[str]:
        cutoff = self._clock.now() - self._stale_after
        async with self._uow_factory() as uow:
            stale = await uow.participants.list_stale(cutoff)

        evicted: list[str] = []
        for participant in stale:
            try:
                async with self._uow_factory() as uow:
                    removed = await participant_service.evict_if_stale(
                        participant.name, cutoff, uow, self._clock,
                    )
            except Exception:
                logger.exception("Failed to evict participant %s", participant.name)
                continue
            if removed:
                evicted.append(participant.name)

        if evicted:
            logger.info("Evicted %d stale participants: %s", len(evicted), ", ".join(evicted))
        return evicted


async def run_sweeper() -> None:
    """Standalone worker, for deployments that run the sweeper out of the API process."""
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    redis = create_redis(settings.REDIS_URL)

    sweeper = LivenessSweeper(
        lambda: uow_scope(session_factory),
        SystemClock(ZoneInfo(settings.DISPLAY_TIMEZONE)),
        interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
        stale_after_seconds=settings.STALE_AFTER_SECONDS,
        lock=(
            RedisSweepLock(redis, settings.SWEEPER_LOCK_KEY, settings.SWEEPER_LOCK_TTL_SECONDS)
            if redis is not None
            else None
        ),
    )
    await sweeper.start()
    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await sweeper.stop()
        if redis is not None:
            await redis.aclose()
        await engine.dispose()


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(run_sweeper())


if __name__ == "__main__":
    main()
