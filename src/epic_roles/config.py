from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import (
    DEFAULT_CREATE_PACING_SECONDS,
    DEFAULT_RATE_LIMIT_WAIT_SECONDS,
)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


@dataclass(frozen=True)
class Settings:
    token: str
    # Channel that receives "X got the Y role" posts; 0 disables them.
    role_log_channel_id: int = 0
    roles_file: str = "roles.json"
    command_prefix: str = "!"
    log_level: str = "INFO"

    # Bulk role creation
    queue_concurrency: int = 5
    # 0 keeps retrying rate-limited creations until they succeed.
    queue_max_retries: int = 0
    rate_limit_default_wait_seconds: float = DEFAULT_RATE_LIMIT_WAIT_SECONDS
    create_pacing_seconds: float = DEFAULT_CREATE_PACING_SECONDS

    # Keep-alive HTTP server for hosts that idle sleeping processes
    keepalive_enabled: bool = True
    port: int = 3000
    self_ping_interval_seconds: int = 300


def load_settings() -> Settings:
    token = (os.getenv("DISCORD_TOKEN", "") or os.getenv("DISCORD_TOK", "")).strip()
    if not token:
        raise RuntimeError("DISCORD_TOKEN is required")
    return Settings(
        token=token,
        role_log_channel_id=_get_int("ROLE_LOG_CHANNEL", 0),
        roles_file=_get_str("ROLES_FILE", "roles.json"),
        command_prefix=_get_str("COMMAND_PREFIX", "!"),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        queue_concurrency=max(1, _get_int("ROLE_QUEUE_CONCURRENCY", 5)),
        queue_max_retries=max(0, _get_int("ROLE_QUEUE_MAX_RETRIES", 0)),
        rate_limit_default_wait_seconds=_get_float(
            "RATE_LIMIT_DEFAULT_WAIT_SECONDS", DEFAULT_RATE_LIMIT_WAIT_SECONDS
        ),
        create_pacing_seconds=_get_float("ROLE_CREATE_PACING_SECONDS", DEFAULT_CREATE_PACING_SECONDS),
        keepalive_enabled=_get_bool("KEEPALIVE_ENABLED", True),
        port=_get_int("PORT", 3000),
        self_ping_interval_seconds=max(1, _get_int("SELF_PING_INTERVAL_SECONDS", 300)),
    )
