from __future__ import annotations

import logging
from typing import List

import discord
from discord.ext import commands

from .cogs.color_roles import ColorRolesCog
from .config import Settings
from .error_handlers import setup_error_handlers
from .services.role_definitions import RoleDefinition, load_role_definitions
from .services.role_log import RoleChangeLogger
from .services.role_provisioner import RoleProvisioner
from .services.stats import RuntimeStats
from .ui.color_menu import ColorMenuHandler, ColorRoleSelect

log = logging.getLogger("epic_roles.bot")


class EpicRolesBot(commands.Bot):
    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        intents.members = True
        # ``!epic-roles`` is a prefix command, which needs message content.
        intents.message_content = True

        log.info("INTENTS: guilds=%s members=%s message_content=%s", intents.guilds, intents.members, intents.message_content)

        super().__init__(
            command_prefix=settings.command_prefix,
            intents=intents,
            allowed_mentions=discord.AllowedMentions(everyone=False, roles=False, users=True),
            help_command=None,
        )

        self.settings = settings
        self.stats = RuntimeStats()
        self.role_definitions: List[RoleDefinition] = load_role_definitions(settings.roles_file)
        self.provisioner = RoleProvisioner(settings, self.stats)
        self.role_logger = RoleChangeLogger(settings.role_log_channel_id)
        self.color_menu = ColorMenuHandler(
            self.provisioner,
            lambda: self.role_definitions,
            self.role_logger,
            self.stats,
        )

    async def setup_hook(self) -> None:
        await setup_error_handlers(self)

        # Menus posted before a restart route through the dynamic select.
        self.add_dynamic_items(ColorRoleSelect)

        await self.add_cog(ColorRolesCog(self))
        log.info("Startup complete: %d role definitions, cogs=%s", len(self.role_definitions), ", ".join(self.cogs))

    async def on_ready(self) -> None:
        log.info("✅ Logged in as %s", self.user)
