"""Tests for the message and events listener cogs."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from fakes import BOT_USER_ID, LOG_CHANNEL_ID, make_message
from stickerguard.bot.cogs import events_listener, message_listener
from stickerguard.datatypes.policy_datatypes import EmitStatus


@pytest.fixture
def cog_bot():
    bot = MagicMock()
    bot.user = SimpleNamespace(id=BOT_USER_ID)
    bot.guilds = [object(), object()]
    bot.change_presence = AsyncMock()
    return bot


class TestMessageListenerCog:
    @pytest.mark.asyncio
    async def test_guild_message_is_handed_to_pipeline(self, cog_bot):
        pipeline = SimpleNamespace(handle_message=AsyncMock())
        cog = message_listener.MessageListenerCog(cog_bot, pipeline)
        message = make_message(sticker_ids=[1])

        await cog.on_message(message)

        pipeline.handle_message.assert_awaited_once_with(message)

    @pytest.mark.asyncio
    async def test_dm_and_own_messages_are_ignored(self, cog_bot):
        pipeline = SimpleNamespace(handle_message=AsyncMock())
        cog = message_listener.MessageListenerCog(cog_bot, pipeline)

        await cog.on_message(make_message(guild_id=None))
        await cog.on_message(make_message(author=SimpleNamespace(id=BOT_USER_ID)))

        pipeline.handle_message.assert_not_awaited()

    def test_setup_adds_cog(self, cog_bot):
        pipeline = SimpleNamespace(handle_message=AsyncMock())

        message_listener.setup(cog_bot, pipeline)

        cog = cog_bot.add_cog.call_args.args[0]
        assert isinstance(cog, message_listener.MessageListenerCog)
        assert cog.pipeline is pipeline


class TestEventsListenerCog:
    @pytest.mark.asyncio
    async def test_on_ready_warms_log_channel_and_sets_presence(self, cog_bot, log_channel):
        cache = SimpleNamespace(channel_id=LOG_CHANNEL_ID, get_or_fetch=AsyncMock(return_value=(log_channel, None)))
        cog = events_listener.EventsListenerCog(cog_bot, cache)

        await cog.on_ready()

        cache.get_or_fetch.assert_awaited_once()
        activity = cog_bot.change_presence.await_args.kwargs["activity"]
        assert activity.type is discord.ActivityType.watching
        assert activity.name == "forwarded stickers"

    @pytest.mark.asyncio
    async def test_on_ready_logs_unusable_log_channel(self, cog_bot):
        cache = SimpleNamespace(
            channel_id=LOG_CHANNEL_ID,
            get_or_fetch=AsyncMock(return_value=(None, EmitStatus.NOT_TEXT_CHANNEL)),
        )
        cog = events_listener.EventsListenerCog(cog_bot, cache)

        with patch.object(events_listener.logger, "error") as mock_error:
            await cog.on_ready()

        assert "not_text_channel" in mock_error.call_args.args[0]
        cog_bot.change_presence.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_setup_registers_cog_and_error_handler(self, cog_bot):
        cache = SimpleNamespace(channel_id=LOG_CHANNEL_ID, get_or_fetch=AsyncMock())

        events_listener.setup(cog_bot, cache)

        assert isinstance(cog_bot.add_cog.call_args.args[0], events_listener.EventsListenerCog)
        on_error = cog_bot.event.call_args.args[0]
        assert on_error.__name__ == "on_error"

        with patch.object(events_listener, "log_client_error") as mock_log:
            await on_error("on_message", object())
        mock_log.assert_called_once_with("on_message")
