"""Color role picker.

Each page is a single select menu with custom id ``colorRoles_<page>``. The
select is registered as a dynamic item, so menus posted before a restart keep
routing to ``ColorMenuHandler`` without any per-message bookkeeping.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

import discord

from ..constants import (
    AUDIT_REASON,
    COLOR_MENU_CUSTOM_ID_PREFIX,
    COLOR_MENU_PLACEHOLDER,
    ERROR_MESSAGES,
    MAX_SELECT_OPTIONS,
)
from ..services.role_definitions import RoleDefinition
from ..services.role_log import RoleChangeLogger
from ..services.role_provisioner import RoleProvisioner
from ..services.stats import RuntimeStats
from ..utils import chunked, safe_response

log = logging.getLogger("epic_roles.ui.color_menu")


def page_custom_id(page: int) -> str:
    return f"{COLOR_MENU_CUSTOM_ID_PREFIX}{page}"


def build_options(pairs: Sequence[Tuple[RoleDefinition, discord.Role]]) -> List[discord.SelectOption]:
    return [
        discord.SelectOption(
            label=role.name,
            value=str(role.id),
            emoji=definition.emoji or None,
            description=definition.color,
        )
        for definition, role in pairs
    ]


class ColorRoleSelect(
    discord.ui.DynamicItem[discord.ui.Select],
    template=re.escape(COLOR_MENU_CUSTOM_ID_PREFIX) + r"(?P<page>[0-9]+)",
):
    def __init__(self, page: int, options: Optional[List[discord.SelectOption]] = None) -> None:
        super().__init__(
            discord.ui.Select(
                custom_id=page_custom_id(page),
                placeholder=COLOR_MENU_PLACEHOLDER,
                min_values=0,
                max_values=1,
                options=options or [],
            )
        )
        self.page = page

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Select,
        match: re.Match[str],
    ) -> "ColorRoleSelect":
        return cls(int(match["page"]))

    async def callback(self, interaction: discord.Interaction) -> None:
        handler: Optional[ColorMenuHandler] = getattr(interaction.client, "color_menu", None)
        if handler is None:
            log.error("Color menu interaction received but no handler is attached to the client")
            return
        await handler.handle(interaction, list(self.item.values))


def build_color_menus(pairs: Sequence[Tuple[RoleDefinition, discord.Role]]) -> List[Tuple[str, discord.ui.View]]:
    """One (content, view) per page of up to 25 roles."""
    pages: List[Tuple[str, discord.ui.View]] = []
    for index, chunk in enumerate(chunked(pairs, MAX_SELECT_OPTIONS)):
        view = discord.ui.View(timeout=None)
        view.add_item(ColorRoleSelect(index, build_options(chunk)))
        pages.append((f"🎨 **Color Roles Page {index + 1}**", view))
    return pages


class ColorMenuHandler:
    """Applies a member's pick from a color menu: at most one color role at a time."""

    def __init__(
        self,
        provisioner: RoleProvisioner,
        definitions: Callable[[], Sequence[RoleDefinition]],
        role_logger: RoleChangeLogger,
        stats: Optional[RuntimeStats] = None,
    ) -> None:
        self.provisioner = provisioner
        self._definitions = definitions
        self.role_logger = role_logger
        self.stats = stats or provisioner.stats

    async def handle(self, interaction: discord.Interaction, values: Sequence[str]) -> None:
        guild = interaction.guild
        member = interaction.user
        if guild is None or getattr(member, "roles", None) is None:
            return

        color_ids = self.provisioner.color_role_ids(guild, self._definitions())

        chosen: Optional[discord.Role] = None
        if values:
            try:
                chosen = guild.get_role(int(values[0]))
            except ValueError:
                chosen = None
            # Only roles still listed in roles.json may be handed out.
            if chosen is None or chosen.id not in color_ids:
                await safe_response(interaction, ERROR_MESSAGES["role_missing"], ephemeral=True)
                return

        current = [role for role in member.roles if role.id in color_ids]
        stale = [role for role in current if chosen is None or role.id != chosen.id]

        try:
            if stale:
                await member.remove_roles(*stale, reason=AUDIT_REASON)
            if chosen is not None and all(role.id != chosen.id for role in current):
                await member.add_roles(chosen, reason=AUDIT_REASON)
        except discord.Forbidden:
            log.warning(f"Missing permissions to update color roles for {member} in guild {guild.id}")
            await safe_response(interaction, ERROR_MESSAGES["forbidden"], ephemeral=True)
            return
        except discord.HTTPException as e:
            log.error(f"Failed to update color roles for {member}: {e}")
            await safe_response(interaction, ERROR_MESSAGES["api_error"], ephemeral=True)
            return

        if chosen is not None:
            self.stats.roles_assigned += 1
            await self.role_logger.given(guild, member, chosen.name)
            await safe_response(interaction, f"✅ You now have the **{chosen.name}** role!", ephemeral=True)
        else:
            self.stats.roles_cleared += 1
            await self.role_logger.cleared(guild, member)
            await safe_response(interaction, "🗑️ Removed your color role.", ephemeral=True)
