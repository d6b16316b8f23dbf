"""
Sticker policy decisions.

Pure functions only: given the resolution of a snapshot and the guild the
message was posted in, decide whether the message violates the no foreign
stickers policy and whether enforcement should go ahead.
"""

from __future__ import annotations

from typing import Iterable

from stickerguard.datatypes.discord_datatypes import GuildID
from stickerguard.datatypes.policy_datatypes import (
    GENERIC_REASON,
    REASON_SEPARATOR,
    PermissionVerdict,
    PolicyVerdict,
    ReasonCode,
)
from stickerguard.datatypes.sticker_datatypes import ResolutionFailure, ResolvedSticker


def render_reason(reason_codes: Iterable[ReasonCode]) -> str:
    """Join reason labels in declaration order, e.g. ``"External server sticker • Unverified origin"``."""
    present = set(reason_codes)
    labels = [code.label for code in ReasonCode if code in present]
    if not labels:
        return GENERIC_REASON
    return REASON_SEPARATOR.join(labels)


def decide(
    resolved: Iterable[ResolvedSticker],
    failed: Iterable[ResolutionFailure],
    guild_id: GuildID | int | str | None,
) -> PolicyVerdict:
    """Decide whether a snapshot's stickers violate the policy.

    Args:
        resolved: Stickers whose origin is known.
        failed: Stickers that could not be resolved.
        guild_id: The guild the forwarded message was posted in.

    Returns:
        PolicyVerdict: ``violates`` is True when any reason code fires. A
        snapshot with nothing resolved and nothing failed never violates.
    """
    resolved = tuple(resolved or ())
    failed = tuple(failed or ())
    self_guild = GuildID.optional(guild_id)

    codes: set[ReasonCode] = set()

    if self_guild is not None and any(sticker.is_foreign(self_guild) for sticker in resolved):
        codes.add(ReasonCode.FOREIGN_GUILD_STICKER)

    if any(entry.is_unknown_sticker for entry in failed):
        codes.add(ReasonCode.UNRESOLVABLE_STICKER)

    if not resolved and failed:
        codes.add(ReasonCode.UNVERIFIED_ORIGIN)

    if not codes:
        return PolicyVerdict(violates=False)

    return PolicyVerdict(
        violates=True,
        reason_codes=frozenset(codes),
        human_reason=render_reason(codes),
    )


def should_enforce(verdict: PolicyVerdict, permission: PermissionVerdict) -> bool:
    """Return True when a violation must be enforced.

    Only a checked, granted permission excuses a violation; an unverified
    check falls through to enforcement.
    """
    return verdict.violates and not permission.bypasses_enforcement
