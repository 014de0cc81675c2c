from __future__ import annotations

import logging
from typing import Optional

import discord

from ..constants import (
    DEFAULT_RATE_LIMIT_WAIT_SECONDS,
    RATE_LIMIT_ERROR_CODES,
    RATE_LIMIT_MESSAGE,
)

log = logging.getLogger("epic_roles.rate_limits")


def _positive_float(value: object) -> Optional[float]:
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


def is_rate_limited(exc: BaseException) -> bool:
    """True when ``exc`` means Discord wants us to slow down."""
    if isinstance(exc, discord.RateLimited):
        return True
    if isinstance(exc, discord.HTTPException):
        if exc.status == 429 or exc.code in RATE_LIMIT_ERROR_CODES:
            return True
    return RATE_LIMIT_MESSAGE in str(exc)


def suggested_wait(exc: BaseException) -> Optional[float]:
    """Wait the server asked for, in seconds, if the error carries one."""
    hinted = _positive_float(getattr(exc, "retry_after", None))
    if hinted is not None:
        return hinted

    # discord.HTTPException drops the JSON body, but Discord repeats its
    # retry_after in these headers.
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if headers:
        for name in ("Retry-After", "X-RateLimit-Reset-After"):
            wait = _positive_float(headers.get(name))
            if wait is not None:
                return wait
    return None


def rate_limit_delay(
    exc: BaseException,
    default: float = DEFAULT_RATE_LIMIT_WAIT_SECONDS,
) -> Optional[float]:
    """Seconds to sleep before retrying, or ``None`` for a permanent failure."""
    if not is_rate_limited(exc):
        return None
    wait = suggested_wait(exc)
    if wait is None:
        log.debug(f"No retry hint on {type(exc).__name__}; using default {default:.2f}s")
        return default
    return wait
