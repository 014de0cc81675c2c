from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, List, TypeVar

import discord
from discord.ext import commands

log = logging.getLogger("epic_roles.utils")

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive lists of at most ``size``."""
    if size < 1:
        raise ValueError("size must be >= 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


async def safe_response(
    target: discord.Interaction | commands.Context,
    content: str | None = None,
    embed: discord.Embed | None = None,
    ephemeral: bool = False,
    **kwargs: Any,
) -> bool:
    """Reply to an interaction or command context, logging instead of raising on API errors."""
    try:
        if isinstance(target, commands.Context):
            await target.reply(content=content, embed=embed, **kwargs)
        elif target.response.is_done():
            await target.followup.send(content=content, embed=embed, ephemeral=ephemeral, **kwargs)
        else:
            await target.response.send_message(content=content, embed=embed, ephemeral=ephemeral, **kwargs)
        return True
    except discord.HTTPException as e:
        log.error(f"Failed to send response: {e}")
        return False
