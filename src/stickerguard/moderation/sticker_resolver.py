"""
Sticker origin resolution.

Each sticker id of a forwarded snapshot is resolved independently: local
caches first (the message, its guild, then the client), a REST fetch on a
miss. All lookups run concurrently and every one of them settles, failed
fetches included, before the resolution is returned.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable

import discord

from stickerguard.datatypes.discord_datatypes import GuildID, StickerID
from stickerguard.datatypes.sticker_datatypes import (
    ResolutionFailure,
    ResolvedSticker,
    StickerOrigin,
    StickerResolution,
    sticker_preview_url,
)
from stickerguard.util import discord_utils
from stickerguard.util.logger import get_logger

logger = get_logger("sticker_resolver")


def to_resolved_sticker(sticker: Any) -> ResolvedSticker:
    """Convert a Discord sticker model into a :class:`ResolvedSticker`."""
    sticker_id = StickerID(sticker.id)
    preview_url = getattr(sticker, "url", None)

    return ResolvedSticker(
        sticker_id=sticker_id,
        name=getattr(sticker, "name", None) or "Unknown",
        origin=StickerOrigin.from_sticker_type(getattr(sticker, "type", None)),
        origin_guild_id=GuildID.optional(getattr(sticker, "guild_id", None)),
        preview_url=str(preview_url) if preview_url else sticker_preview_url(sticker_id),
    )


def _carries_origin(candidate: Any) -> bool:
    # StickerItem payloads only hold id/name/format and cannot tell us the origin
    return candidate is not None and getattr(candidate, "type", None) is not None


def _find_by_id(stickers: Iterable[Any] | None, sticker_id: StickerID) -> Any | None:
    if not stickers:
        return None
    for candidate in stickers:
        if getattr(candidate, "id", None) == sticker_id.to_int():
            return candidate
    return None


def lookup_cached_sticker(bot: Any, message: discord.Message, sticker_id: StickerID) -> Any | None:
    """
    Look ``sticker_id`` up in the local caches without touching the network.

    Order: stickers attached to the message itself, the stickers of the
    message's guild, then the client-wide sticker cache.
    """
    candidate = _find_by_id(getattr(message, "stickers", None), sticker_id)
    if _carries_origin(candidate):
        return candidate

    guild = getattr(message, "guild", None)
    candidate = _find_by_id(getattr(guild, "stickers", None), sticker_id)
    if _carries_origin(candidate):
        return candidate

    get_sticker = getattr(bot, "get_sticker", None)
    if callable(get_sticker):
        candidate = get_sticker(sticker_id.to_int())
        if _carries_origin(candidate):
            return candidate

    return None


async def resolve_sticker(bot: Any, message: discord.Message, sticker_id: StickerID) -> ResolvedSticker | ResolutionFailure:
    """Resolve a single sticker id; failures are returned, never raised."""
    try:
        cached = lookup_cached_sticker(bot, message, sticker_id)
        if cached is not None:
            logger.debug("[STICKER FETCH] Sticker %s served from cache", sticker_id)
            return to_resolved_sticker(cached)

        sticker = await bot.fetch_sticker(sticker_id.to_int())
        return to_resolved_sticker(sticker)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        return ResolutionFailure(
            sticker_id=sticker_id,
            error_message=discord_utils.http_error_message(exc) or "Unknown error occurred",
            error_code=discord_utils.http_error_code(exc),
        )


async def resolve_stickers(bot: Any, message: discord.Message, sticker_ids: Iterable[StickerID]) -> StickerResolution:
    """
    Resolve every sticker id concurrently and split the results.

    Args:
        bot: Discord client used for cache lookups and ``fetch_sticker``.
        message: The forwarded message being inspected.
        sticker_ids: Ids extracted from the forwarded snapshot.

    Returns:
        StickerResolution: One entry per id, in either ``resolved`` or ``failed``.
    """
    ids = list(dict.fromkeys(sticker_ids))
    if not ids:
        return StickerResolution()

    results = await asyncio.gather(
        *(resolve_sticker(bot, message, sticker_id) for sticker_id in ids),
        return_exceptions=True,
    )

    resolved: list[ResolvedSticker] = []
    failed: list[ResolutionFailure] = []
    for sticker_id, result in zip(ids, results):
        if isinstance(result, ResolvedSticker):
            resolved.append(result)
        elif isinstance(result, ResolutionFailure):
            failed.append(result)
        else:
            # resolve_sticker only lets cancellation escape
            failed.append(
                ResolutionFailure(
                    sticker_id=sticker_id,
                    error_message=str(result) or type(result).__name__,
                    error_code=discord_utils.http_error_code(result),
                )
            )

    logger.info("[STICKER FETCH] Successfully resolved %d/%d sticker(s)", len(resolved), len(ids))
    if failed:
        logger.warning("[STICKER FETCH] Failed to resolve %d sticker(s):", len(failed))
        for entry in failed:
            logger.warning("[STICKER FETCH]   - ID %s: %s (Code: %s)", entry.sticker_id, entry.error_message, entry.error_code)

    return StickerResolution(resolved=tuple(resolved), failed=tuple(failed))
