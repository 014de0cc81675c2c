from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import discord

from ..config import Settings
from ..constants import AUDIT_REASON
from .role_definitions import RoleDefinition, parse_hex_color
from .role_queue import QueueResult, RoleCreationQueue, RoleTask, SleepFn
from .stats import RuntimeStats

log = logging.getLogger("epic_roles.role_provisioner")


def role_snapshot(guild: discord.Guild) -> Dict[str, discord.Role]:
    """Name -> role for the guild's cached roles. First match wins on duplicate names."""
    snapshot: Dict[str, discord.Role] = {}
    for role in guild.roles:
        snapshot.setdefault(role.name, role)
    return snapshot


class RoleProvisioner:
    """Creates, removes and resolves the color roles of a guild."""

    def __init__(
        self,
        settings: Settings,
        stats: Optional[RuntimeStats] = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.stats = stats or RuntimeStats()
        self._sleep = sleep

    async def provision(
        self,
        guild: discord.Guild,
        definitions: Sequence[RoleDefinition],
        concurrency: Optional[int] = None,
    ) -> QueueResult:
        snapshot = role_snapshot(guild)

        async def create(task: RoleTask) -> discord.Role:
            return await guild.create_role(
                name=task.name,
                colour=discord.Colour(parse_hex_color(task.color)),
                reason=AUDIT_REASON,
            )

        queue = RoleCreationQueue(
            [d.to_task() for d in definitions],
            exists=snapshot.get,
            create=create,
            concurrency=concurrency or self.settings.queue_concurrency,
            max_retries=self.settings.queue_max_retries or None,
            default_wait=self.settings.rate_limit_default_wait_seconds,
            pacing=self.settings.create_pacing_seconds,
            sleep=self._sleep,
        )
        result = await queue.run()

        self.stats.roles_created += len(result.created)
        self.stats.roles_abandoned += len(result.abandoned)
        for name, reason in result.abandoned.items():
            log.warning(f"Guild {guild.id}: role {name!r} was not created ({reason})")
        return result

    async def remove(self, guild: discord.Guild, definitions: Sequence[RoleDefinition]) -> List[str]:
        snapshot = role_snapshot(guild)
        removed: List[str] = []
        for definition in definitions:
            role = snapshot.get(definition.name)
            if role is None:
                continue
            try:
                await role.delete(reason=AUDIT_REASON)
            except discord.HTTPException as e:
                log.warning(f"Failed to delete role {definition.name!r} in guild {guild.id}: {e}")
                continue
            log.info(f"Removed role: {definition.name}")
            removed.append(definition.name)

        self.stats.roles_deleted += len(removed)
        return removed

    def resolve(
        self, guild: discord.Guild, definitions: Sequence[RoleDefinition]
    ) -> List[Tuple[RoleDefinition, discord.Role]]:
        snapshot = role_snapshot(guild)
        return [(d, snapshot[d.name]) for d in definitions if d.name in snapshot]

    def color_role_ids(self, guild: discord.Guild, definitions: Sequence[RoleDefinition]) -> set[int]:
        return {role.id for _, role in self.resolve(guild, definitions)}
