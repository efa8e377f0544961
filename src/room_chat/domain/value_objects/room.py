"""Fixed vocabulary of the shared room."""
from __future__ import annotations

from datetime import datetime

BROADCAST_RECIPIENT = "Todos"

ENTERED_TEXT = "entra na sala..."
LEFT_TEXT = "sai da sala..."

CLOCK_TIME_FORMAT = "%H:%M:%S"


def clock_time(ts: datetime) -> str:
    """Wall-clock label shown next to a message (seconds precision)."""
    return ts.strftime(CLOCK_TIME_FORMAT)
