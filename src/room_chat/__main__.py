"""Entrypoint: python -m room_chat"""
from __future__ import annotations

import uvicorn

from room_chat.config import settings
from room_chat.log_config import configure_logging


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "room_chat.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
