from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Default wall-clock implementation."""

    def __init__(self, tz: tzinfo = timezone.utc) -> None:
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)
