"""
Audit records for sticker enforcement and their delivery to the log channel.

``build_audit_record`` freezes the evidence of one decision.
``AuditLogEmitter`` renders it through :mod:`stickerguard.ui.audit_embed` and
sends it to the log channel resolved by ``LogChannelCache``. Emission makes a
single attempt and reports problems as :class:`EmitResult` values; it never
raises into the message handler.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable

import discord

from stickerguard.datatypes.discord_datatypes import ChannelID, GuildID, MessageID, StickerID, UserID
from stickerguard.datatypes.policy_datatypes import (
    AuditRecord,
    EmitResult,
    EmitStatus,
    EnforcementOutcome,
    PermissionVerdict,
    PolicyVerdict,
)
from stickerguard.datatypes.sticker_datatypes import StickerResolution
from stickerguard.ui import audit_embed
from stickerguard.util import discord_utils
from stickerguard.util.logger import get_logger

logger = get_logger("audit_log")


def build_audit_record(
    message: discord.Message,
    sticker_ids: Iterable[StickerID],
    resolution: StickerResolution,
    policy: PolicyVerdict,
    permission: PermissionVerdict,
    outcome: EnforcementOutcome,
    alert_mention: str | None = None,
) -> AuditRecord:
    """Assemble the immutable audit record for an enforced message."""
    author = message.author
    return AuditRecord(
        guild_id=GuildID(message.guild.id),
        channel_id=ChannelID(message.channel.id),
        message_id=MessageID(message.id),
        author_id=UserID.optional(getattr(author, "id", None)),
        author_tag=discord_utils.format_user_tag(author),
        author_avatar_url=discord_utils.avatar_url(author),
        sticker_ids=tuple(sticker_ids),
        resolution=resolution,
        permission=permission,
        policy=policy,
        outcome=outcome,
        alert_mention=alert_mention or None,
    )


class LogChannelCache:
    """
    Lazily resolved log channel.

    The cached channel is only returned while its id matches the configured
    id; on a mismatch it is dropped and resolved again. Concurrent first
    lookups may each fetch, they all store an equivalent channel.
    """

    def __init__(self, bot: Any, channel_id: ChannelID | int | str) -> None:
        self.bot = bot
        self.channel_id = ChannelID(channel_id)
        self._channel: Any | None = None
        self.last_status: EmitStatus | None = None

    @property
    def cached(self) -> Any | None:
        return self._channel

    def invalidate(self) -> None:
        self._channel = None

    async def _fetch(self) -> Any | None:
        channel = self.bot.get_channel(self.channel_id.to_int())
        if channel is not None:
            return channel
        logger.info("[LOG CHANNEL] Fetching log channel with ID: %s", self.channel_id)
        return await self.bot.fetch_channel(self.channel_id.to_int())

    async def _join_thread_if_needed(self, channel: Any) -> None:
        if not isinstance(channel, discord.Thread):
            return
        if channel.me is not None or channel.archived or channel.locked:
            return
        logger.info("[LOG CHANNEL] Joining thread: %s", channel.name)
        await channel.join()

    async def get_or_fetch(self) -> tuple[Any | None, EmitStatus | None]:
        """
        Return ``(channel, None)`` when the log channel is usable, otherwise
        ``(None, status)`` explaining why it is not.
        """
        cached = self._channel
        if cached is not None:
            if self.channel_id == getattr(cached, "id", None):
                return cached, None
            self.invalidate()

        try:
            channel = await self._fetch()
            if channel is None:
                logger.error("[LOG CHANNEL] Channel not found - verify LOG_CHANNEL_ID")
                return None, EmitStatus.CHANNEL_UNAVAILABLE

            if not isinstance(channel, discord.abc.Messageable):
                logger.error("[LOG CHANNEL] Channel %s is not text-based - cannot send messages", self.channel_id)
                return None, EmitStatus.NOT_TEXT_CHANNEL

            await self._join_thread_if_needed(channel)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error(
                "[LOG CHANNEL] ✗ Failed to fetch log channel %s: %s (Code: %s)",
                self.channel_id,
                discord_utils.http_error_message(exc),
                discord_utils.http_error_code(exc),
            )
            logger.error("[LOG CHANNEL] Ensure the bot has access to the channel and the ID is correct")
            return None, EmitStatus.CHANNEL_UNAVAILABLE

        self._channel = channel
        logger.info("[LOG CHANNEL] ✓ Log channel ready: %s (ID: %s)", getattr(channel, "name", None) or "Unknown", channel.id)
        return channel, None


class AuditLogEmitter:
    """Send audit records to the log channel as embed cards."""

    def __init__(
        self,
        channel_cache: LogChannelCache,
        accent_color: int = audit_embed.DEFAULT_ACCENT_COLOR,
        title: str = audit_embed.DEFAULT_TITLE,
    ) -> None:
        self.channel_cache = channel_cache
        self.accent_color = accent_color
        self.title = title

    def _result(self, status: EmitStatus, error_code: int | str | None = None) -> EmitResult:
        self.channel_cache.last_status = status
        return EmitResult(status=status, error_code=error_code)

    async def emit(self, record: AuditRecord) -> EmitResult:
        """Send ``record`` once. Failures are logged and returned, never raised."""
        try:
            channel, status = await self.channel_cache.get_or_fetch()
            if channel is None:
                logger.error("[LOG MESSAGE] Cannot log - log channel unavailable")
                return self._result(status or EmitStatus.CHANNEL_UNAVAILABLE)

            embeds = audit_embed.build_audit_embeds(record, self.accent_color, self.title)
            await channel.send(
                content=f"-# {record.alert_mention}" if record.alert_mention else None,
                embeds=embeds,
                allowed_mentions=discord.AllowedMentions.all(),
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error_code = discord_utils.http_error_code(exc)
            logger.error("[LOG MESSAGE] ✗ Failed to send log message: %s (Code: %s)", discord_utils.http_error_message(exc), error_code)
            if error_code == discord_utils.INVALID_FORM_BODY_ERROR_CODE:
                logger.error("[LOG MESSAGE] API Error 50035 - Invalid form body. The audit card was rejected")
                return self._result(EmitStatus.INVALID_FORM_BODY, error_code)
            if error_code == discord_utils.MISSING_PERMISSIONS_ERROR_CODE:
                logger.error("[LOG MESSAGE] Missing permissions to send messages in the log channel")
                return self._result(EmitStatus.MISSING_PERMISSIONS, error_code)
            return self._result(EmitStatus.SEND_FAILED, error_code)

        logger.info("[LOG MESSAGE] ✓ Log message sent to channel %s", getattr(channel, "name", None) or channel.id)
        return self._result(EmitStatus.SENT)
