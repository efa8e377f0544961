"""Root conftest: exports .env.test into the environment before room_chat.config is imported."""
from __future__ import annotations

import os
from pathlib import Path


def _load_env_file(path: Path) -> None:
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip().strip("\"'"))


_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    _load_env_file(_env_test)
