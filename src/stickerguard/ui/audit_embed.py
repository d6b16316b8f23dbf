"""
Embed rendering for sticker audit records.

An audit card is one summary embed followed by one embed per sticker so each
sticker can carry its own preview thumbnail.
"""

import discord

from stickerguard.datatypes.policy_datatypes import AuditRecord
from stickerguard.datatypes.sticker_datatypes import ResolvedSticker, sticker_preview_url
from stickerguard.datatypes.discord_datatypes import StickerID
from stickerguard.util.logger import get_logger

logger = get_logger("audit_embed")

DEFAULT_ACCENT_COLOR = 0xF97316
DEFAULT_TITLE = "Sticker Bypassing Detected"

UNKNOWN = "Unknown"
FIELD_VALUE_LIMIT = 1024
# Discord rejects messages with more than 10 embeds
MAX_EMBEDS = 10


def quote(value: object) -> str:
    """Render a field value as a block quote, truncated to Discord's field limit."""
    text = str(value) if value not in (None, "") else UNKNOWN
    rendered = f"> {text}"
    if len(rendered) > FIELD_VALUE_LIMIT:
        rendered = rendered[: FIELD_VALUE_LIMIT - 1] + "…"
    return rendered


def build_summary_embed(record: AuditRecord, accent_color: int = DEFAULT_ACCENT_COLOR, title: str = DEFAULT_TITLE) -> discord.Embed:
    """Build the main audit embed: reason, action, author, context, permission and links."""
    embed = discord.Embed(
        title=f"🚫 {title} 🚫",
        color=discord.Color(accent_color),
        timestamp=record.created_at,
    )

    embed.add_field(name="Reason", value=quote(record.reason), inline=False)
    embed.add_field(name="Action", value=quote(record.outcome.status_label), inline=False)

    # Forwarded by
    embed.add_field(name="👤 Mention", value=quote(record.author_mention), inline=True)
    embed.add_field(name="ID", value=quote(record.author_id), inline=True)
    embed.add_field(name="Tag", value=quote(record.author_tag), inline=True)
    if record.author_avatar_url:
        embed.set_thumbnail(url=record.author_avatar_url)

    # Context
    embed.add_field(name="📍 Channel", value=quote(f"<#{record.channel_id}>"), inline=True)
    embed.add_field(name="Message", value=quote(f"[Jump to Message]({record.message_url})"), inline=True)
    sticker_ids = ", ".join(str(sticker_id) for sticker_id in record.sticker_ids)
    embed.add_field(name="Sticker IDs", value=quote(sticker_ids), inline=False)
    embed.add_field(name="Permission", value=quote(record.permission.status_label), inline=False)

    links = [f"- [Open Channel]({record.channel_url})", f"- [Original Message]({record.message_url})"]
    if record.author_url:
        links.append(f"- [View User Profile]({record.author_url})")
    embed.add_field(name="🔗 Links", value="\n".join(links), inline=False)

    embed.set_footer(text=f"Guild: {record.guild_id}")
    return embed


def build_sticker_embed(sticker: ResolvedSticker, accent_color: int = DEFAULT_ACCENT_COLOR) -> discord.Embed:
    embed = discord.Embed(title="🎨 Sticker Details", color=discord.Color(accent_color))
    embed.add_field(name="Name", value=quote(sticker.name), inline=True)
    embed.add_field(name="ID", value=quote(sticker.sticker_id), inline=True)
    embed.add_field(name="Type", value=quote(sticker.origin.label), inline=True)
    if sticker.origin_guild_id is not None:
        embed.add_field(name="Origin Guild", value=quote(sticker.origin_guild_id), inline=True)
    embed.set_thumbnail(url=sticker.preview_url)
    return embed


def build_unknown_sticker_embed(sticker_id: StickerID, accent_color: int = DEFAULT_ACCENT_COLOR) -> discord.Embed:
    embed = discord.Embed(title="🎨 Sticker Details", color=discord.Color(accent_color))
    embed.add_field(name="ID", value=quote(sticker_id), inline=True)
    embed.add_field(name="Status", value=quote("Metadata unavailable"), inline=True)
    embed.set_thumbnail(url=sticker_preview_url(sticker_id, size=1024))
    return embed


def build_audit_embeds(
    record: AuditRecord,
    accent_color: int = DEFAULT_ACCENT_COLOR,
    title: str = DEFAULT_TITLE,
) -> list[discord.Embed]:
    """
    Render ``record`` as the list of embeds sent to the log channel.

    Resolved stickers each get a detail embed; stickers that failed to
    resolve get a placeholder embed with the CDN preview instead.

    Args:
        record: The audit record to render.
        accent_color: Embed side color.
        title: Heading of the summary embed.

    Returns:
        list[discord.Embed]: Summary embed first, at most ``MAX_EMBEDS`` in total.
    """
    embeds = [build_summary_embed(record, accent_color, title)]

    for sticker in record.resolution.resolved:
        embeds.append(build_sticker_embed(sticker, accent_color))
    for failure in record.resolution.failed:
        embeds.append(build_unknown_sticker_embed(failure.sticker_id, accent_color))

    if len(embeds) > MAX_EMBEDS:
        logger.warning("[LOG BUILDER] Dropping %d sticker embed(s) over the Discord limit", len(embeds) - MAX_EMBEDS)
        embeds = embeds[:MAX_EMBEDS]

    return embeds
