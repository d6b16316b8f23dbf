"""Check whether a message author may post stickers from other servers."""

from __future__ import annotations

import asyncio

import discord

from stickerguard.datatypes.policy_datatypes import PermissionCheckError, PermissionVerdict
from stickerguard.util import discord_utils
from stickerguard.util.logger import get_logger

logger = get_logger("permission_oracle")


async def resolve_member(message: discord.Message) -> discord.Member:
    """
    Return the guild member behind ``message.author``.

    Forwarded messages often arrive with a bare ``User`` author, in which case
    the member is fetched from the guild.
    """
    author = message.author
    if isinstance(author, discord.Member):
        return author

    logger.debug("[PERMISSION] Fetching member data for user %s", author.id)
    return await message.guild.fetch_member(author.id)


async def check_external_sticker_permission(message: discord.Message) -> PermissionVerdict:
    """
    Determine whether the author holds ``use_external_stickers`` in the guild.

    Guild-level permissions are used, so administrators and the owner are
    always allowed. Anything short of a definitive boolean answer yields an
    unverified verdict, which callers must treat as not allowed.
    """
    if message.guild is None or message.author is None:
        logger.warning("[PERMISSION] Cannot check permissions - missing guild or author")
        return PermissionVerdict.unverified(PermissionCheckError.MISSING_CONTEXT)

    try:
        member = await resolve_member(message)
        has_permission = member.guild_permissions.use_external_stickers
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.warning(
            "[PERMISSION] Unable to fetch member or check permissions: %s (Code: %s)",
            discord_utils.http_error_message(exc),
            discord_utils.http_error_code(exc),
        )
        return PermissionVerdict.unverified(PermissionCheckError.MEMBER_UNAVAILABLE)

    if isinstance(has_permission, bool):
        return PermissionVerdict(allowed=has_permission, checked=True)

    logger.warning("[PERMISSION] Permission check returned non-boolean value %r", has_permission)
    return PermissionVerdict.unverified(PermissionCheckError.NON_BOOLEAN_RESULT)
