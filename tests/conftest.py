from __future__ import annotations

from types import SimpleNamespace
from typing import List

import pytest

from epic_roles.config import Settings
from epic_roles.services.role_definitions import RoleDefinition
from epic_roles.services.role_log import RoleChangeLogger
from epic_roles.services.role_provisioner import RoleProvisioner
from epic_roles.services.stats import RuntimeStats
from epic_roles.ui.color_menu import ColorMenuHandler


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_settings(**overrides) -> Settings:
    values = dict(token="token", create_pacing_seconds=0.0, queue_concurrency=3)
    values.update(overrides)
    return Settings(**values)


def make_definitions(count: int) -> List[RoleDefinition]:
    return [RoleDefinition(name=f"Color {i}", color=f"#{i * 4099:06X}", emoji="🎨" if i % 2 else None) for i in range(count)]


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def fake_bot(sleeper: SleepRecorder):
    """Attribute bag with the services the cog and menu handler read off the bot."""
    settings = make_settings(role_log_channel_id=0)
    stats = RuntimeStats()
    provisioner = RoleProvisioner(settings, stats, sleep=sleeper)
    bot = SimpleNamespace(
        settings=settings,
        stats=stats,
        provisioner=provisioner,
        role_definitions=make_definitions(3),
        role_logger=RoleChangeLogger(None),
    )
    bot.color_menu = ColorMenuHandler(provisioner, lambda: bot.role_definitions, bot.role_logger, stats)
    return bot
