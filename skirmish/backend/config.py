"""Configuration helpers for backend runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class BackendSettings:
    database_url: str | None
    content_path: str | None
    host: str
    port: int
    log_level: str
    seed: int | None


def load_settings() -> BackendSettings:
    port_raw = os.getenv("SKIRMISH_PORT", "8000")
    seed_raw = os.getenv("SKIRMISH_SEED")
    return BackendSettings(
        database_url=os.getenv("SKIRMISH_DATABASE_URL"),
        content_path=os.getenv("SKIRMISH_CONTENT_PATH"),
        host=os.getenv("SKIRMISH_HOST", "127.0.0.1"),
        port=int(port_raw),
        log_level=os.getenv("SKIRMISH_LOG_LEVEL", "INFO").upper(),
        seed=int(seed_raw) if seed_raw else None,
    )
