from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=_FORMAT, force=True)

    # discord.py is chatty at DEBUG/INFO (gateway heartbeats, HTTP buckets).
    logging.getLogger("discord").setLevel(max(resolved, logging.INFO))
    logging.getLogger("discord.http").setLevel(max(resolved, logging.WARNING))
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    logging.getLogger("epic_roles").info("Logging configured at %s", logging.getLevelName(resolved))
