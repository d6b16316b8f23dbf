"""
Sticker data structures used by the origin resolver and the policy engine.

A forwarded message carries its stickers inside a snapshot of the original
message. The snapshot is parsed once into :class:`ForwardedSnapshot`; each
referenced sticker then ends up as exactly one :class:`ResolvedSticker` or one
:class:`ResolutionFailure` inside a :class:`StickerResolution`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

import discord

from stickerguard.datatypes.discord_datatypes import GuildID, StickerID

# JSON error code Discord returns for a sticker that no longer exists
UNKNOWN_STICKER_ERROR_CODE = 10060
UNKNOWN_ERROR_CODE = "UNKNOWN_ERROR"

STICKER_PREVIEW_URL = "https://media.discordapp.net/stickers/{sticker_id}.png?size={size}"


def sticker_preview_url(sticker_id: StickerID | int | str, size: int = 256) -> str:
    """Build the deterministic CDN preview URL for a sticker id."""
    return STICKER_PREVIEW_URL.format(sticker_id=sticker_id, size=size)


class StickerOrigin(Enum):
    """Where a sticker comes from."""

    GUILD = "guild"
    STANDARD = "standard"
    UNKNOWN = "unknown"

    @classmethod
    def from_sticker_type(cls, raw_type: Any) -> "StickerOrigin":
        """Map a ``discord.StickerType`` (or its raw integer value) to an origin."""
        if raw_type is None:
            return cls.UNKNOWN
        value = getattr(raw_type, "value", raw_type)
        if value == discord.StickerType.guild.value:
            return cls.GUILD
        if value == discord.StickerType.standard.value:
            return cls.STANDARD
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return {
            StickerOrigin.GUILD: "Guild Sticker",
            StickerOrigin.STANDARD: "Standard Sticker",
            StickerOrigin.UNKNOWN: "Unknown Type",
        }[self]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ForwardedSnapshot:
    """The sticker ids found in the snapshot of a forwarded message, in order."""

    sticker_ids: tuple[StickerID, ...] = ()

    @classmethod
    def from_ids(cls, raw_ids: Iterable[Any]) -> "ForwardedSnapshot":
        """Build a snapshot from raw ids, dropping invalid and duplicate entries."""
        seen: set[StickerID] = set()
        ordered: list[StickerID] = []
        for raw in raw_ids:
            sticker_id = StickerID.optional(raw)
            if sticker_id is None or sticker_id in seen:
                continue
            seen.add(sticker_id)
            ordered.append(sticker_id)
        return cls(tuple(ordered))

    @property
    def has_stickers(self) -> bool:
        return bool(self.sticker_ids)


@dataclass(frozen=True, slots=True)
class ResolvedSticker:
    """Metadata of a sticker whose origin could be determined.

    Attributes:
        sticker_id: The sticker snowflake.
        name: Display name, ``"Unknown"`` when the platform omitted it.
        origin: Whether the sticker belongs to a guild or the standard catalog.
        origin_guild_id: Owning guild for guild stickers, otherwise None.
        preview_url: Image URL suitable for an embed thumbnail.
    """

    sticker_id: StickerID
    name: str
    origin: StickerOrigin
    origin_guild_id: GuildID | None
    preview_url: str

    def is_foreign(self, guild_id: GuildID | int | str) -> bool:
        """Return True for a guild sticker owned by a guild other than ``guild_id``."""
        if self.origin is not StickerOrigin.GUILD or self.origin_guild_id is None:
            return False
        return self.origin_guild_id != GuildID(guild_id)


@dataclass(frozen=True, slots=True)
class ResolutionFailure:
    """A sticker reference whose metadata could not be fetched."""

    sticker_id: StickerID
    error_message: str
    error_code: int | str = UNKNOWN_ERROR_CODE

    @property
    def is_unknown_sticker(self) -> bool:
        return self.error_code == UNKNOWN_STICKER_ERROR_CODE


@dataclass(frozen=True, slots=True)
class StickerResolution:
    """Outcome of resolving every sticker of one snapshot."""

    resolved: tuple[ResolvedSticker, ...] = field(default_factory=tuple)
    failed: tuple[ResolutionFailure, ...] = field(default_factory=tuple)

    @property
    def sticker_ids(self) -> tuple[StickerID, ...]:
        return tuple(s.sticker_id for s in self.resolved) + tuple(f.sticker_id for f in self.failed)

    @property
    def total(self) -> int:
        return len(self.resolved) + len(self.failed)
