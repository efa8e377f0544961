"""Redis-backed lock guarding one liveness sweep at a time across replicas."""
from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.asyncio.lock import Lock
from redis.exceptions import LockError

logger = logging.getLogger(__name__)


def create_redis(url: str) -> aioredis.Redis | None:
    """Client shared by the API and the standalone sweeper; empty url disables it."""
    if not url:
        return None
    return aioredis.from_url(url, decode_responses=True)


class RedisSweepLock:
    """Implements application.ports.lock.SweepLock."""

    def __init__(self, redis: aioredis.Redis, key: str, ttl_seconds: float) -> None:
        self._redis = redis
        self._key = key
        self._ttl = ttl_seconds
        self._lock: Lock | None = None

    async def acquire(self) -> bool:
        lock = self._redis.lock(self._key, timeout=self._ttl, blocking=False)
        if not await lock.acquire():
            return False
        self._lock = lock
        return True

    async def release(self) -> None:
        lock, self._lock = self._lock, None
        if lock is None:
            return
        try:
            await lock.release()
        except LockError:
            logger.warning("Sweep lock %s expired before release", self._key)
