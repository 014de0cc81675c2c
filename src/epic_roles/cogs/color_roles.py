from __future__ import annotations

import logging
from typing import Optional, Sequence

import discord
from discord.ext import commands

from ..constants import ERROR_MESSAGES, USAGE
from ..services.role_definitions import RoleDefinition
from ..ui.color_menu import build_color_menus
from ..utils import safe_response

log = logging.getLogger("epic_roles.cogs.color_roles")


class ColorRolesCog(commands.Cog):
    """``!epic-roles add | remove | dropdown <channel-id>``."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @property
    def definitions(self) -> Sequence[RoleDefinition]:
        return self.bot.role_definitions

    async def cog_load(self) -> None:
        log.info(f"Loaded {self.__class__.__name__}")

    async def cog_check(self, ctx: commands.Context) -> bool:
        if ctx.guild is None:
            raise commands.NoPrivateMessage()
        if not ctx.author.guild_permissions.administrator:
            raise commands.MissingPermissions(["administrator"])
        return True

    @commands.group(name="epic-roles", invoke_without_command=True)
    async def epic_roles(self, ctx: commands.Context) -> None:
        await safe_response(ctx, USAGE.format(prefix=ctx.prefix or self.bot.settings.command_prefix))

    @epic_roles.command(name="add")
    async def add_roles(self, ctx: commands.Context) -> None:
        await self.add(ctx)

    @epic_roles.command(name="remove")
    async def remove_roles(self, ctx: commands.Context) -> None:
        await self.remove(ctx)

    @epic_roles.command(name="dropdown")
    async def dropdown(self, ctx: commands.Context, channel_id: Optional[str] = None) -> None:
        await self.post_dropdown(ctx, channel_id)

    async def add(self, ctx: commands.Context) -> None:
        async with ctx.typing():
            result = await self.bot.provisioner.provision(
                ctx.guild, self.definitions, concurrency=self.bot.settings.queue_concurrency
            )
        log.info(
            f"Guild {ctx.guild.id}: {len(result)}/{len(self.definitions)} color roles present "
            f"after add ({len(result.abandoned)} abandoned)"
        )
        await safe_response(ctx, f"✅ Added/verified **{len(result)}** roles from `roles.json`.")

    async def remove(self, ctx: commands.Context) -> None:
        async with ctx.typing():
            removed = await self.bot.provisioner.remove(ctx.guild, self.definitions)
        if removed:
            await safe_response(ctx, f"🗑️ Removed **{len(removed)}** roles from `roles.json`.")
        else:
            await safe_response(ctx, "⚠️ No matching roles were found to remove.")

    async def post_dropdown(self, ctx: commands.Context, channel_id: Optional[str]) -> None:
        if not channel_id:
            await safe_response(ctx, ERROR_MESSAGES["missing_channel_id"])
            return

        channel = await self._fetch_channel(ctx.guild, channel_id)
        if channel is None:
            await safe_response(ctx, ERROR_MESSAGES["invalid_channel"])
            return

        pairs = self.bot.provisioner.resolve(ctx.guild, self.definitions)
        if not pairs:
            await safe_response(ctx, "⚠️ No color roles exist yet. Run `!epic-roles add` first.")
            return

        for content, view in build_color_menus(pairs):
            await channel.send(content=content, view=view)
            self.bot.stats.menus_posted += 1

        await safe_response(ctx, f"✅ Dropdown menus created in <#{channel.id}>")

    async def _fetch_channel(self, guild: discord.Guild, raw_id: str):
        try:
            channel_id = int(raw_id.strip("<#>"))
        except ValueError:
            return None
        try:
            channel = await guild.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden, discord.InvalidData):
            return None
        except discord.HTTPException as e:
            log.warning(f"Failed to fetch channel {channel_id}: {e}")
            return None
        if not hasattr(channel, "send"):
            return None
        return channel
