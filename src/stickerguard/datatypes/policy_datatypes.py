"""
Decision, enforcement and audit data structures.

Every stage of the sticker pipeline reports its failures as values defined
here instead of raising, so the policy engine and the audit record can show
exactly what happened.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum

from stickerguard.datatypes.discord_datatypes import ChannelID, GuildID, MessageID, StickerID, UserID
from stickerguard.datatypes.sticker_datatypes import StickerResolution

GENERIC_REASON = "Sticker policy violation"
REASON_SEPARATOR = " • "

DISCORD_URL = "https://discord.com"


class ReasonCode(Enum):
    """Why a forwarded message violates the sticker policy.

    Declaration order is the order reasons are rendered in.
    """

    FOREIGN_GUILD_STICKER = "foreign_guild_sticker"
    UNRESOLVABLE_STICKER = "unresolvable_sticker"
    UNVERIFIED_ORIGIN = "unverified_origin"

    @property
    def label(self) -> str:
        return REASON_LABELS[self]

    def __str__(self) -> str:
        return self.value


REASON_LABELS = {
    ReasonCode.FOREIGN_GUILD_STICKER: "External server sticker",
    ReasonCode.UNRESOLVABLE_STICKER: "Unknown/deleted sticker",
    ReasonCode.UNVERIFIED_ORIGIN: "Unverified origin",
}


class PermissionCheckError(Enum):
    NONE = "none"
    MISSING_CONTEXT = "missing_context"
    MEMBER_UNAVAILABLE = "member_unavailable"
    NON_BOOLEAN_RESULT = "non_boolean_result"


@dataclass(frozen=True, slots=True)
class PermissionVerdict:
    """Whether the author may post stickers from other servers.

    ``checked`` is False when no definitive answer could be reached; in that
    case ``allowed`` is always False.
    """

    allowed: bool
    checked: bool
    error: PermissionCheckError = PermissionCheckError.NONE

    @classmethod
    def granted(cls) -> "PermissionVerdict":
        return cls(allowed=True, checked=True)

    @classmethod
    def denied(cls) -> "PermissionVerdict":
        return cls(allowed=False, checked=True)

    @classmethod
    def unverified(cls, error: PermissionCheckError) -> "PermissionVerdict":
        return cls(allowed=False, checked=False, error=error)

    @property
    def bypasses_enforcement(self) -> bool:
        return self.checked and self.allowed

    @property
    def status_label(self) -> str:
        if not self.checked:
            return "⚠️ Permission unverified"
        if self.allowed:
            return "✅ Has external sticker access"
        return "❌ No external sticker access"


@dataclass(frozen=True, slots=True)
class PolicyVerdict:
    violates: bool
    reason_codes: frozenset[ReasonCode] = frozenset()
    human_reason: str = ""

    @property
    def ordered_reasons(self) -> tuple[ReasonCode, ...]:
        return tuple(code for code in ReasonCode if code in self.reason_codes)


class EnforcementError(Enum):
    NONE = "none"
    NOT_DELETABLE = "not_deletable"
    ALREADY_DELETED = "already_deleted"
    FORBIDDEN = "forbidden"
    HTTP_ERROR = "http_error"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True, slots=True)
class EnforcementOutcome:
    """Result of the single deletion attempt made for one message."""

    attempted: bool
    deleted: bool
    error: EnforcementError = EnforcementError.NONE
    error_code: int | str | None = None

    @property
    def status_label(self) -> str:
        if self.deleted:
            return "✓ Message deleted"
        if self.error is EnforcementError.ALREADY_DELETED:
            return "✗ Message was already deleted"
        if not self.attempted:
            return "✗ Message not deletable"
        return "✗ Message deletion failed"


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """Complete evidence for one enforcement decision.

    Built once after enforcement and never modified; the log channel card is
    rendered from this record alone.
    """

    guild_id: GuildID
    channel_id: ChannelID
    message_id: MessageID
    author_id: UserID | None
    author_tag: str
    author_avatar_url: str | None
    sticker_ids: tuple[StickerID, ...]
    resolution: StickerResolution
    permission: PermissionVerdict
    policy: PolicyVerdict
    outcome: EnforcementOutcome
    alert_mention: str | None = None
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    @property
    def reason(self) -> str:
        return self.policy.human_reason or GENERIC_REASON

    @property
    def channel_url(self) -> str:
        return f"{DISCORD_URL}/channels/{self.guild_id}/{self.channel_id}"

    @property
    def message_url(self) -> str:
        return f"{self.channel_url}/{self.message_id}"

    @property
    def author_url(self) -> str | None:
        if self.author_id is None:
            return None
        return f"{DISCORD_URL}/users/{self.author_id}"

    @property
    def author_mention(self) -> str | None:
        if self.author_id is None:
            return None
        return f"<@{self.author_id}>"


class EmitStatus(Enum):
    SENT = "sent"
    CHANNEL_UNAVAILABLE = "channel_unavailable"
    NOT_TEXT_CHANNEL = "not_text_channel"
    INVALID_FORM_BODY = "invalid_form_body"
    MISSING_PERMISSIONS = "missing_permissions"
    SEND_FAILED = "send_failed"


@dataclass(frozen=True, slots=True)
class EmitResult:
    status: EmitStatus
    error_code: int | str | None = None

    @property
    def ok(self) -> bool:
        return self.status is EmitStatus.SENT
