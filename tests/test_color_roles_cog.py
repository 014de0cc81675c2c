from __future__ import annotations

import asyncio

import discord
import pytest
from discord.ext import commands

from epic_roles.cogs.color_roles import ColorRolesCog
from epic_roles.constants import USAGE
from epic_roles.testing.fakes import FakeContext, FakeGuild, FakeMember, http_error


def test_add_creates_and_reports_count(fake_bot) -> None:
    guild = FakeGuild()
    guild.add_role("Color 0")
    ctx = FakeContext(guild)
    cog = ColorRolesCog(fake_bot)

    asyncio.run(cog.add(ctx))

    assert ctx.replies == ["✅ Added/verified **3** roles from `roles.json`."]
    assert sorted(c["name"] for c in guild.create_calls) == ["Color 1", "Color 2"]


def test_add_twice_creates_nothing_new(fake_bot) -> None:
    guild = FakeGuild()
    cog = ColorRolesCog(fake_bot)

    asyncio.run(cog.add(FakeContext(guild)))
    ctx = FakeContext(guild)
    asyncio.run(cog.add(ctx))

    assert len(guild.create_calls) == 3
    assert ctx.replies == ["✅ Added/verified **3** roles from `roles.json`."]


def test_remove_reports_removed_roles(fake_bot) -> None:
    guild = FakeGuild()
    guild.add_role("Color 0")
    guild.add_role("Color 2")
    ctx = FakeContext(guild)

    asyncio.run(ColorRolesCog(fake_bot).remove(ctx))

    assert ctx.replies == ["🗑️ Removed **2** roles from `roles.json`."]
    assert guild.roles == []


def test_remove_with_nothing_to_remove(fake_bot) -> None:
    ctx = FakeContext(FakeGuild())
    asyncio.run(ColorRolesCog(fake_bot).remove(ctx))
    assert ctx.replies == ["⚠️ No matching roles were found to remove."]


def test_dropdown_requires_channel_id(fake_bot) -> None:
    ctx = FakeContext(FakeGuild())
    asyncio.run(ColorRolesCog(fake_bot).post_dropdown(ctx, None))
    assert ctx.replies == ["❌ Please provide a channel ID."]


@pytest.mark.parametrize("raw", ["not-a-number", "999999"])
def test_dropdown_rejects_unknown_channel(fake_bot, raw: str) -> None:
    ctx = FakeContext(FakeGuild())
    asyncio.run(ColorRolesCog(fake_bot).post_dropdown(ctx, raw))
    assert ctx.replies == ["❌ Invalid channel ID."]


def test_dropdown_posts_one_menu_per_page(fake_bot) -> None:
    guild = FakeGuild()
    for definition in fake_bot.role_definitions:
        guild.add_role(definition.name, definition.color_value)
    channel = guild.add_channel("pick-a-color")
    ctx = FakeContext(guild)

    asyncio.run(ColorRolesCog(fake_bot).post_dropdown(ctx, f"<#{channel.id}>"))

    assert [m["content"] for m in channel.sent] == ["🎨 **Color Roles Page 1**"]
    view = channel.sent[0]["view"]
    assert len(view.children[0].item.options) == 3
    assert ctx.replies == [f"✅ Dropdown menus created in <#{channel.id}>"]
    assert fake_bot.stats.menus_posted == 1


def test_dropdown_without_roles_asks_for_add(fake_bot) -> None:
    guild = FakeGuild()
    channel = guild.add_channel()
    ctx = FakeContext(guild)

    asyncio.run(ColorRolesCog(fake_bot).post_dropdown(ctx, str(channel.id)))

    assert channel.sent == []
    assert ctx.replies == ["⚠️ No color roles exist yet. Run `!epic-roles add` first."]


def test_non_admin_fails_check(fake_bot) -> None:
    ctx = FakeContext(FakeGuild(), author=FakeMember(administrator=False))
    with pytest.raises(commands.MissingPermissions):
        asyncio.run(ColorRolesCog(fake_bot).cog_check(ctx))


def test_admin_passes_check(fake_bot) -> None:
    ctx = FakeContext(FakeGuild(), author=FakeMember(administrator=True))
    assert asyncio.run(ColorRolesCog(fake_bot).cog_check(ctx)) is True


def test_bare_group_replies_with_usage(fake_bot) -> None:
    ctx = FakeContext(FakeGuild(), prefix="?")
    cog = ColorRolesCog(fake_bot)

    asyncio.run(cog.epic_roles.callback(cog, ctx))

    assert ctx.replies == [USAGE.format(prefix="?")]
    assert "`?epic-roles dropdown <channel-id>`" in ctx.replies[0]


def test_group_exposes_subcommands(fake_bot) -> None:
    cog = ColorRolesCog(fake_bot)

    assert cog.epic_roles.name == "epic-roles"
    assert cog.epic_roles.invoke_without_command is True
    assert {c.name for c in cog.epic_roles.commands} == {"add", "remove", "dropdown"}


def test_failed_reply_is_logged_not_raised(fake_bot) -> None:
    class BrokenContext(FakeContext):
        async def reply(self, content=None, **kwargs):
            raise http_error(403, "Missing Permissions", code=50013, cls=discord.Forbidden)

    ctx = BrokenContext(FakeGuild())
    asyncio.run(ColorRolesCog(fake_bot).remove(ctx))

    assert ctx.replies == []
