from __future__ import annotations

from typing import Protocol


class SweepLock(Protocol):
    """Cross-process mutual exclusion for a single sweep tick."""

    async def acquire(self) -> bool: ...
    async def release(self) -> None: ...
