"""Tests for the external sticker permission check."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from fakes import AUTHOR_ID, http_error, make_member, make_message
from stickerguard.datatypes.policy_datatypes import PermissionCheckError, PermissionVerdict
from stickerguard.moderation import permission_oracle


@pytest.mark.asyncio
async def test_member_with_permission_is_allowed():
    message = make_message(author=make_member(use_external_stickers=True))

    verdict = await permission_oracle.check_external_sticker_permission(message)

    assert verdict == PermissionVerdict.granted()
    message.guild.fetch_member.assert_not_awaited()


@pytest.mark.asyncio
async def test_member_without_permission_is_denied():
    message = make_message(author=make_member(use_external_stickers=False))

    verdict = await permission_oracle.check_external_sticker_permission(message)

    assert verdict == PermissionVerdict(allowed=False, checked=True)


@pytest.mark.asyncio
async def test_plain_user_author_triggers_member_fetch():
    user = SimpleNamespace(id=AUTHOR_ID, name="forwarder", discriminator="0")
    message = make_message(author=user)
    message.guild.fetch_member = AsyncMock(return_value=make_member(use_external_stickers=True))

    verdict = await permission_oracle.check_external_sticker_permission(message)

    message.guild.fetch_member.assert_awaited_once_with(AUTHOR_ID)
    assert verdict.allowed and verdict.checked


@pytest.mark.asyncio
async def test_member_fetch_failure_is_unverified():
    message = make_message(author=SimpleNamespace(id=AUTHOR_ID))
    message.guild.fetch_member = AsyncMock(side_effect=http_error(discord.NotFound, 404, 10007, "Unknown Member"))

    verdict = await permission_oracle.check_external_sticker_permission(message)

    assert verdict == PermissionVerdict.unverified(PermissionCheckError.MEMBER_UNAVAILABLE)
    assert not verdict.bypasses_enforcement


@pytest.mark.asyncio
async def test_missing_guild_or_author_is_unverified():
    no_guild = make_message(guild_id=None)
    no_author = make_message()
    no_author.author = None

    for message in (no_guild, no_author):
        verdict = await permission_oracle.check_external_sticker_permission(message)
        assert verdict == PermissionVerdict(allowed=False, checked=False, error=PermissionCheckError.MISSING_CONTEXT)


@pytest.mark.asyncio
async def test_non_boolean_permission_value_is_unverified():
    member = make_member()
    member.guild_permissions = SimpleNamespace(use_external_stickers=None)
    message = make_message(author=member)

    verdict = await permission_oracle.check_external_sticker_permission(message)

    assert verdict.checked is False
    assert verdict.allowed is False
    assert verdict.error is PermissionCheckError.NON_BOOLEAN_RESULT


def test_status_labels():
    assert PermissionVerdict.granted().status_label.endswith("Has external sticker access")
    assert PermissionVerdict.denied().status_label.endswith("No external sticker access")
    assert PermissionVerdict.unverified(PermissionCheckError.MISSING_CONTEXT).status_label.endswith("Permission unverified")
