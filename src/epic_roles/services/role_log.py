from __future__ import annotations

import logging

import discord

log = logging.getLogger("epic_roles.role_log")


class RoleChangeLogger:
    """Mirrors color role changes to the process log and an optional guild channel."""

    def __init__(self, channel_id: int | None) -> None:
        self.channel_id = channel_id or None

    async def given(self, guild: discord.Guild, member: discord.Member, role_name: str) -> None:
        log.info(f'📌 Role Change: {member} was given the role "{role_name}"')
        await self._post(guild, f"📌 {member} got the **{role_name}** role")

    async def cleared(self, guild: discord.Guild, member: discord.Member) -> None:
        log.info(f"📌 Role Change: {member} removed their color role")
        await self._post(guild, f"📌 {member} removed their color role")

    async def _post(self, guild: discord.Guild, message: str) -> None:
        if not self.channel_id:
            return
        channel = guild.get_channel(self.channel_id)
        if channel is None or not hasattr(channel, "send"):
            log.debug(f"Role log channel {self.channel_id} not found in guild {guild.id}")
            return
        try:
            await channel.send(message)
        except discord.HTTPException:
            log.exception("Failed to send role log message")
