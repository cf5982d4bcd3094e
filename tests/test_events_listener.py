from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest
from discord.ext import commands

from bloz.bot.cogs import events_listener


@pytest.fixture
def fake_bot():
    return SimpleNamespace(
        user=SimpleNamespace(id=999, display_name="Bloz"),
        guilds=[SimpleNamespace(id=1), SimpleNamespace(id=2)],
        change_presence=AsyncMock(),
    )


def make_ctx():
    return SimpleNamespace(
        command=SimpleNamespace(name="whitelist"),
        respond=AsyncMock(),
        followup=SimpleNamespace(send=AsyncMock()),
    )


def test_setup_adds_cog(fake_bot):
    captured = {}
    fake_bot.add_cog = lambda cog: captured.setdefault("cog", cog)

    events_listener.setup(fake_bot)

    assert isinstance(captured["cog"], events_listener.EventsListenerCog)


@pytest.mark.asyncio
async def test_on_ready_sets_presence(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)

    await cog.on_ready()

    fake_bot.change_presence.assert_awaited_once()
    activity = fake_bot.change_presence.await_args.kwargs["activity"]
    assert activity.name == "for stray links"


@pytest.mark.asyncio
async def test_on_ready_without_user_skips_presence(fake_bot):
    fake_bot.user = None
    cog = events_listener.EventsListenerCog(fake_bot)

    await cog.on_ready()

    fake_bot.change_presence.assert_not_awaited()


@pytest.mark.asyncio
async def test_command_error_sends_generic_reply(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)
    ctx = make_ctx()

    await cog.on_application_command_error(ctx, RuntimeError("disk on fire"))

    ctx.respond.assert_awaited_once_with(events_listener.COMMAND_ERROR_MESSAGE, ephemeral=True)
    assert events_listener.COMMAND_ERROR_MESSAGE == "Something went sideways. Try again."


@pytest.mark.asyncio
async def test_command_error_falls_back_to_followup(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)
    ctx = make_ctx()
    ctx.respond.side_effect = discord.InteractionResponded(SimpleNamespace())

    await cog.on_application_command_error(ctx, RuntimeError("late failure"))

    ctx.followup.send.assert_awaited_once_with(events_listener.COMMAND_ERROR_MESSAGE, ephemeral=True)


@pytest.mark.asyncio
async def test_command_error_reply_failure_is_swallowed(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)
    ctx = make_ctx()
    ctx.respond.side_effect = RuntimeError("gone")

    await cog.on_application_command_error(ctx, RuntimeError("first"))

    ctx.followup.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_command_is_ignored(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)
    ctx = make_ctx()

    await cog.on_application_command_error(ctx, commands.CommandNotFound())

    ctx.respond.assert_not_awaited()
