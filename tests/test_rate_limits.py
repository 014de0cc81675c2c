from __future__ import annotations

import discord

from epic_roles.services.rate_limits import is_rate_limited, rate_limit_delay, suggested_wait
from epic_roles.testing.fakes import http_error


def test_429_uses_retry_after_header() -> None:
    exc = http_error(429, "Too Many Requests", headers={"Retry-After": "3.5"})
    assert is_rate_limited(exc)
    assert rate_limit_delay(exc) == 3.5


def test_429_body_retry_after_is_honoured() -> None:
    exc = http_error(429, "You are being rate limited.", retry_after=3.0)
    assert rate_limit_delay(exc, default=5.0) == 3.0


def test_reset_after_header_used_when_retry_after_missing() -> None:
    exc = http_error(429, "You are being rate limited.", headers={"X-RateLimit-Reset-After": "1.25"})
    assert rate_limit_delay(exc, default=5.0) == 1.25


def test_discord_rate_limited_uses_its_hint() -> None:
    exc = discord.RateLimited(12.0)
    assert suggested_wait(exc) == 12.0
    assert rate_limit_delay(exc, default=1.0) == 12.0


def test_message_match_without_hint_falls_back_to_default() -> None:
    exc = RuntimeError("429 Too Many Requests")
    assert rate_limit_delay(exc, default=4.0) == 4.0


def test_zero_or_garbage_hint_is_ignored() -> None:
    exc = http_error(429, "Too Many Requests", headers={"Retry-After": "soon"})
    assert rate_limit_delay(exc, default=2.0) == 2.0

    exc = discord.RateLimited(0)
    assert rate_limit_delay(exc, default=2.0) == 2.0


def test_other_errors_are_permanent() -> None:
    assert rate_limit_delay(http_error(404, "Unknown Role", code=10011, cls=discord.NotFound)) is None
    assert rate_limit_delay(http_error(500, "Internal Server Error")) is None
    assert rate_limit_delay(ValueError("bad color")) is None
