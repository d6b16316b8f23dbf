"""Delete messages that break the sticker policy."""

from __future__ import annotations

import asyncio

import discord

from stickerguard.datatypes.policy_datatypes import EnforcementError, EnforcementOutcome
from stickerguard.util import discord_utils
from stickerguard.util.logger import get_logger

logger = get_logger("enforcement")


async def enforce(message: discord.Message) -> EnforcementOutcome:
    """
    Make one attempt at deleting ``message``.

    Deletion errors are logged and folded into the returned outcome so the
    audit record can still be sent. A message that is already gone is
    reported as not deletable rather than as a failure.
    """
    if not discord_utils.is_message_deletable(message):
        logger.warning(
            "[ENFORCEMENT] ✗ Message %s is not deletable - may lack permissions or message already deleted",
            message.id,
        )
        return EnforcementOutcome(attempted=False, deleted=False, error=EnforcementError.NOT_DELETABLE)

    try:
        await message.delete()
    except asyncio.CancelledError:
        raise
    except discord.NotFound as exc:
        logger.warning("[ENFORCEMENT] ✗ Message %s was already deleted", message.id)
        return EnforcementOutcome(
            attempted=False,
            deleted=False,
            error=EnforcementError.ALREADY_DELETED,
            error_code=discord_utils.http_error_code(exc),
        )
    except discord.Forbidden as exc:
        error_code = discord_utils.http_error_code(exc)
        logger.error("[ENFORCEMENT] ✗ Missing permissions to delete message %s (Code: %s)", message.id, error_code)
        return EnforcementOutcome(attempted=True, deleted=False, error=EnforcementError.FORBIDDEN, error_code=error_code)
    except discord.HTTPException as exc:
        error_code = discord_utils.http_error_code(exc)
        logger.error(
            "[ENFORCEMENT] ✗ Failed to delete message %s: %s (Code: %s)",
            message.id,
            discord_utils.http_error_message(exc),
            error_code,
        )
        return EnforcementOutcome(attempted=True, deleted=False, error=EnforcementError.HTTP_ERROR, error_code=error_code)
    except Exception as exc:
        logger.error("[ENFORCEMENT] ✗ Failed to delete message %s: %s", message.id, exc, exc_info=True)
        return EnforcementOutcome(attempted=True, deleted=False, error=EnforcementError.UNEXPECTED)

    logger.info("[ENFORCEMENT] ✓ Successfully deleted message %s containing restricted sticker(s)", message.id)
    return EnforcementOutcome(attempted=True, deleted=True)
