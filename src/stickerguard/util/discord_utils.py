"""
discord_utils.py
================

Low-level Discord helpers for Stickerguard.

Stateless functions that read Discord models (forwarded snapshots, channel
permissions, HTTP errors, author metadata) so the moderation pipeline never
has to poke at client objects directly.
"""

from __future__ import annotations

from typing import Any, Iterable

import discord

from stickerguard.datatypes.sticker_datatypes import ForwardedSnapshot, UNKNOWN_ERROR_CODE
from stickerguard.util.logger import get_logger

logger = get_logger("discord_utils")

# Discord JSON error codes the audit emitter reports specially
INVALID_FORM_BODY_ERROR_CODE = 50035
MISSING_PERMISSIONS_ERROR_CODE = 50013

AVATAR_SIZE = 2048


# ==========================================
# Forwarded snapshots
# ==========================================

def _first_snapshot(message: discord.Message) -> Any | None:
    """Return the first forwarded snapshot attached to ``message``, if any."""
    for attribute in ("snapshots", "message_snapshots"):
        snapshots = getattr(message, attribute, None)
        if snapshots:
            try:
                return next(iter(snapshots))
            except TypeError:
                return None
    return None


def _raw_sticker_id(entry: Any) -> Any:
    if isinstance(entry, (str, int)):
        return entry
    if isinstance(entry, dict):
        return entry.get("id")
    return getattr(entry, "id", None)


def extract_forwarded_snapshot(message: discord.Message) -> ForwardedSnapshot | None:
    """
    Parse the forwarded snapshot of ``message`` into a :class:`ForwardedSnapshot`.

    The Discord client exposes snapshots either as objects carrying the
    forwarded content directly or wrapped in a ``message`` attribute, and the
    stickers as ``StickerItem`` objects, raw payload dicts or bare ids. All of
    those shapes are handled here so nothing downstream has to.

    Returns:
        ForwardedSnapshot | None: None when the message forwards nothing.
    """
    snapshot = _first_snapshot(message)
    if snapshot is None:
        return None

    content = getattr(snapshot, "message", None) or snapshot
    stickers = getattr(content, "stickers", None)
    if stickers is None and isinstance(content, dict):
        stickers = content.get("stickers") or content.get("sticker_items")
    if not stickers:
        return ForwardedSnapshot()

    if isinstance(stickers, dict):
        stickers = stickers.values()

    try:
        raw_ids: Iterable[Any] = [_raw_sticker_id(entry) for entry in stickers]
    except TypeError:
        logger.warning("[STICKER EXTRACT] Unsupported sticker container %r on message %s", type(stickers).__name__, message.id)
        return ForwardedSnapshot()

    return ForwardedSnapshot.from_ids(raw_ids)


# ==========================================
# Permissions and deletion
# ==========================================

def bot_can_manage_messages(channel: Any, guild: discord.Guild) -> bool:
    """
    Determine if the bot can read and manage messages in ``channel``.

    Args:
        channel: The channel to check permissions for.
        guild (discord.Guild): The guild context to resolve the bot's member object.

    Returns:
        bool: True if the bot can read and manage messages, False otherwise.
    """
    me = getattr(guild, "me", None)
    if me is None:
        return False

    try:
        permissions = channel.permissions_for(me)
    except Exception:  # pragma: no cover - discord internals guard
        return False

    return bool(permissions.read_messages and permissions.manage_messages)


def is_message_deletable(message: discord.Message) -> bool:
    """
    Return True when the bot is currently able to delete ``message``.

    The bot can always delete its own messages; anything else needs the
    Manage Messages permission in the message's channel.
    """
    guild = message.guild
    if guild is None:
        return False

    me = getattr(guild, "me", None)
    author = message.author
    if me is not None and author is not None and author.id == me.id:
        return True

    return bot_can_manage_messages(message.channel, guild)


# ==========================================
# Errors and author metadata
# ==========================================

def http_error_code(exc: BaseException) -> int | str:
    """Return the Discord JSON error code carried by ``exc`` or ``UNKNOWN_ERROR``."""
    code = getattr(exc, "code", None)
    if isinstance(code, int) and not isinstance(code, bool) and code != 0:
        return code
    return UNKNOWN_ERROR_CODE


def http_error_message(exc: BaseException) -> str:
    text = getattr(exc, "text", None)
    if isinstance(text, str) and text:
        return text
    return str(exc) or type(exc).__name__


def format_user_tag(user: discord.abc.User | None) -> str:
    """Render a user as ``name#discriminator`` (legacy) or plain username."""
    if user is None:
        return "Unknown"
    name = getattr(user, "name", None)
    if not name:
        return "Unknown"
    discriminator = getattr(user, "discriminator", None)
    if discriminator and discriminator != "0":
        return f"{name}#{discriminator}"
    return str(name)


def avatar_url(user: discord.abc.User | None) -> str | None:
    """Return a PNG avatar URL for ``user``, falling back to the default avatar."""
    if user is None:
        return None
    try:
        avatar = user.display_avatar
        return str(avatar.with_format("png").with_size(AVATAR_SIZE).url)
    except Exception as exc:
        logger.debug("[LOG BUILDER] Could not resolve avatar for %s: %s", getattr(user, "id", "?"), exc)
        return None
