"""Message listener Cog for Stickerguard.

This cog receives ``on_message`` events and hands forwarded messages that
carry stickers to the sticker policy pipeline.
"""

import discord
from discord.ext import commands

from stickerguard.moderation.sticker_pipeline import StickerPolicyPipeline
from stickerguard.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for feeding new messages into the sticker pipeline."""

    def __init__(self, discord_bot_instance, pipeline: StickerPolicyPipeline):
        """
        Initialize the message listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        pipeline:
            The sticker policy pipeline that processes forwarded messages.
        """
        self.bot = discord_bot_instance
        self.pipeline = pipeline
        logger.info("Message listener cog loaded")

    def _should_process_message(self, message: discord.Message) -> bool:
        """Only guild messages from other accounts are inspected."""
        if message.guild is None:
            return False

        me = self.bot.user
        if me is not None and message.author is not None and message.author.id == me.id:
            return False

        return True

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        """
        Handle new messages by running the sticker pipeline on them.

        The pipeline itself ignores messages without a forwarded snapshot and
        never raises, so one bad message cannot break the listener.
        """
        if not self._should_process_message(message):
            return

        await self.pipeline.handle_message(message)


def setup(discord_bot_instance, pipeline: StickerPolicyPipeline):
    """
    Register the MessageListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    pipeline:
        The sticker policy pipeline shared with the rest of the bot.
    """
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance, pipeline))
