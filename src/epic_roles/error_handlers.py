from __future__ import annotations

import logging

import discord
from discord.ext import commands

from .constants import ERROR_MESSAGES
from .utils import safe_response

log = logging.getLogger("epic_roles.error_handlers")


class ErrorHandler(commands.Cog):
    """Centralized error handling for prefix commands and view callbacks."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.NoPrivateMessage):
            await safe_response(ctx, "❌ This command can only be used in a server.")
            return

        if isinstance(error, commands.BotMissingPermissions):
            await safe_response(ctx, "❌ I need the **Manage Roles** permission to do that.")
            return

        # Any other failed check here is the administrator gate.
        if isinstance(error, commands.CheckFailure):
            await safe_response(ctx, ERROR_MESSAGES["missing_permissions"])
            return

        if isinstance(error, (commands.BadArgument, commands.MissingRequiredArgument)):
            await safe_response(ctx, f"❌ {error}")
            return

        original = getattr(error, "original", error)
        if isinstance(original, discord.Forbidden):
            log.warning(f"Forbidden while running {ctx.command}: {original}")
            await safe_response(ctx, ERROR_MESSAGES["forbidden"])
            return

        log.error(f"Unexpected error in command {ctx.command}", exc_info=original)
        await safe_response(ctx, ERROR_MESSAGES["unexpected"])


async def setup_error_handlers(bot: commands.Bot) -> None:
    await bot.add_cog(ErrorHandler(bot))
