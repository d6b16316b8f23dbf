"""
Forwarded sticker moderation pipeline.

For each forwarded message carrying stickers the pipeline runs, in order:

1. origin resolution of every sticker (concurrent, all branches settle)
2. the policy decision
3. the permission gate (only for violations)
4. enforcement (message deletion)
5. the audit record, built after enforcement so it shows the real outcome
6. emission of the record to the log channel

Messages that do not violate the policy, or whose author may use external
stickers, produce no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import discord

from stickerguard.datatypes.discord_datatypes import GuildID
from stickerguard.datatypes.policy_datatypes import (
    AuditRecord,
    EmitResult,
    EnforcementOutcome,
    PermissionVerdict,
    PolicyVerdict,
    ReasonCode,
)
from stickerguard.datatypes.sticker_datatypes import ForwardedSnapshot, StickerResolution
from stickerguard.moderation import enforcement, permission_oracle, policy_engine, sticker_resolver
from stickerguard.moderation.audit_log import AuditLogEmitter, build_audit_record
from stickerguard.util import discord_utils
from stickerguard.util.logger import get_logger

logger = get_logger("sticker_pipeline")


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """What one pipeline run did. Stages that did not run are left as None."""

    resolution: StickerResolution | None = None
    policy: PolicyVerdict | None = None
    permission: PermissionVerdict | None = None
    outcome: EnforcementOutcome | None = None
    record: AuditRecord | None = None
    emit: EmitResult | None = None

    @property
    def enforced(self) -> bool:
        return self.outcome is not None


SKIPPED = PipelineResult()

POLICY_LOG_LINES = {
    ReasonCode.FOREIGN_GUILD_STICKER: "External guild sticker detected",
    ReasonCode.UNRESOLVABLE_STICKER: "Unknown sticker detected",
    ReasonCode.UNVERIFIED_ORIGIN: "Sticker origin could not be verified",
}


class StickerPolicyPipeline:
    """Runs the sticker policy against forwarded messages of one bot."""

    def __init__(self, bot: Any, emitter: AuditLogEmitter, alert_mention: str | None = None) -> None:
        self.bot = bot
        self.emitter = emitter
        self.alert_mention = alert_mention or None

    async def process(self, message: discord.Message, snapshot: ForwardedSnapshot) -> PipelineResult:
        """Run every stage for a message whose snapshot has at least one sticker."""
        if message.guild is None or not snapshot.has_stickers:
            return SKIPPED

        author_tag = discord_utils.format_user_tag(message.author)
        resolution = await sticker_resolver.resolve_stickers(self.bot, message, snapshot.sticker_ids)

        verdict = policy_engine.decide(resolution.resolved, resolution.failed, GuildID(message.guild.id))
        if not verdict.violates:
            logger.info("[POLICY CHECK] All stickers are from current guild or are standard - no action needed")
            return PipelineResult(resolution=resolution, policy=verdict)

        logger.info("[POLICY CHECK] Policy violation detected:")
        for code in verdict.ordered_reasons:
            logger.info("[POLICY CHECK]   - %s", POLICY_LOG_LINES[code])

        permission = await permission_oracle.check_external_sticker_permission(message)
        if not policy_engine.should_enforce(verdict, permission):
            logger.info("[PERMISSION CHECK] User %s has UseExternalStickers permission - skipping enforcement", author_tag)
            return PipelineResult(resolution=resolution, policy=verdict, permission=permission)

        if permission.checked:
            logger.info("[PERMISSION CHECK] User %s does not have UseExternalStickers permission - enforcing policy", author_tag)
        else:
            logger.warning("[PERMISSION CHECK] Could not verify permissions - proceeding with enforcement")

        outcome = await enforcement.enforce(message)

        record = build_audit_record(
            message,
            snapshot.sticker_ids,
            resolution,
            verdict,
            permission,
            outcome,
            alert_mention=self.alert_mention,
        )
        emit_result = await self.emitter.emit(record)
        if emit_result.ok:
            logger.info("[LOGGING] ✓ Enforcement action logged successfully")
        else:
            logger.error("[LOGGING] ✗ Failed to log enforcement action: %s", emit_result.status.value)

        return PipelineResult(
            resolution=resolution,
            policy=verdict,
            permission=permission,
            outcome=outcome,
            record=record,
            emit=emit_result,
        )

    async def handle_message(self, message: discord.Message) -> PipelineResult:
        """
        Entry point for ``on_message``: detect forwarded stickers and process them.

        Unexpected errors are logged and the event is dropped.
        """
        try:
            if message.guild is None:
                return SKIPPED

            snapshot = discord_utils.extract_forwarded_snapshot(message)
            if snapshot is None or not snapshot.has_stickers:
                return SKIPPED

            author = message.author
            logger.info(
                "[DETECTION] Found %d sticker(s) in forwarded message from %s (ID: %s)",
                len(snapshot.sticker_ids),
                discord_utils.format_user_tag(author),
                getattr(author, "id", "Unknown"),
            )
            logger.info("[DETECTION] Sticker IDs: %s", ", ".join(str(sticker_id) for sticker_id in snapshot.sticker_ids))

            return await self.process(message, snapshot)
        except Exception:
            logger.exception(
                "[MESSAGE HANDLER] Unexpected error processing message %s in channel %s",
                getattr(message, "id", "?"),
                getattr(getattr(message, "channel", None), "id", "?"),
            )
            return SKIPPED
