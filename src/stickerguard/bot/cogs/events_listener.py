"""Event listener Cog for Stickerguard.

This cog handles bot lifecycle events: it reports the connected identity on
``on_ready``, resolves the audit log channel early so configuration mistakes
show up at startup, and logs client errors and warnings.
"""

import sys

import discord
from discord.ext import commands

from stickerguard.moderation.audit_log import LogChannelCache
from stickerguard.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle handlers."""

    def __init__(self, discord_bot_instance, log_channel_cache: LogChannelCache):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        log_channel_cache:
            Cache of the audit log channel, warmed once the bot is ready.
        """
        self.bot = discord_bot_instance
        self.log_channel_cache = log_channel_cache
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Log the bot identity and resolve the log channel."""
        if self.bot.user:
            logger.info(f"[CLIENT] ✓ Logged in as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("[CLIENT] Bot partially connected, but user information not yet available.")

        logger.info(f"[CLIENT] Monitoring {len(self.bot.guilds)} guild(s)")
        logger.info(f"[CLIENT] Log channel ID: {self.log_channel_cache.channel_id}")

        channel, status = await self.log_channel_cache.get_or_fetch()
        if channel is None:
            logger.error(f"[LOG CHANNEL] Log channel is not usable yet ({status.value if status else 'unknown'}); it will be resolved again for the next audit record")

        await self.bot.change_presence(
            status=discord.Status.online,
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="forwarded stickers",
            ),
        )

    @commands.Cog.listener(name="on_resumed")
    async def on_resumed(self):
        logger.info("[CLIENT] Gateway session resumed")


def log_client_error(event_method: str) -> None:
    """Log the exception currently being handled for a failing event handler."""
    logger.error(f"[CLIENT ERROR] Unhandled error in event '{event_method}'", exc_info=sys.exc_info())


def setup(discord_bot_instance, log_channel_cache: LogChannelCache):
    """Register the EventsListenerCog with the bot and route client errors to the logger.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    log_channel_cache:
        The shared audit log channel cache.
    """
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, log_channel_cache))

    async def on_error(event_method: str, *args, **kwargs):
        log_client_error(event_method)

    discord_bot_instance.event(on_error)
