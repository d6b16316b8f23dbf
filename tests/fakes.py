"""Builders for fake Discord objects shared by the test suite."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord


SELF_GUILD_ID = 111111111111111111
OTHER_GUILD_ID = 222222222222222222
CHANNEL_ID = 333333333333333333
MESSAGE_ID = 444444444444444444
AUTHOR_ID = 555555555555555555
BOT_USER_ID = 999999999999999999
LOG_CHANNEL_ID = 777777777777777777


def http_error(exc_type, status: int, code: int, text: str = "error"):
    """Build a discord HTTP exception carrying a JSON error code."""
    response = MagicMock()
    response.status = status
    response.reason = text
    return exc_type(response, {"code": code, "message": text})


def make_sticker(sticker_id, *, guild_id=None, standard=False, name="Sticker", url=None):
    return SimpleNamespace(
        id=sticker_id,
        name=name,
        type=discord.StickerType.standard if standard else discord.StickerType.guild,
        guild_id=None if standard else guild_id,
        url=url if url is not None else f"https://cdn.discordapp.com/stickers/{sticker_id}.png",
    )


def make_member(*, user_id=AUTHOR_ID, use_external_stickers=False):
    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.name = "forwarder"
    member.discriminator = "0"
    member.guild_permissions = SimpleNamespace(use_external_stickers=use_external_stickers)
    member.display_avatar = MagicMock()
    member.display_avatar.with_format.return_value.with_size.return_value.url = (
        f"https://cdn.discordapp.com/avatars/{user_id}/a.png?size=2048"
    )
    return member


def make_message(
    *,
    sticker_ids=(),
    snapshot=True,
    guild_id=SELF_GUILD_ID,
    author=None,
    can_manage_messages=True,
    guild_stickers=(),
):
    """Build a forwarded guild message the pipeline can work on."""
    author = author if author is not None else make_member()
    me = SimpleNamespace(id=BOT_USER_ID)
    guild = None
    if guild_id is not None:
        guild = SimpleNamespace(
            id=guild_id,
            me=me,
            stickers=list(guild_stickers),
            fetch_member=AsyncMock(return_value=author),
        )

    channel = MagicMock()
    channel.id = CHANNEL_ID
    channel.permissions_for.return_value = SimpleNamespace(
        read_messages=can_manage_messages,
        manage_messages=can_manage_messages,
    )

    snapshots = []
    if snapshot:
        stickers = [SimpleNamespace(id=sticker_id, name="item") for sticker_id in sticker_ids]
        snapshots = [SimpleNamespace(message=SimpleNamespace(stickers=stickers))]

    return SimpleNamespace(
        id=MESSAGE_ID,
        guild=guild,
        channel=channel,
        author=author,
        stickers=[],
        snapshots=snapshots,
        delete=AsyncMock(),
    )

