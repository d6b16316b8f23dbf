"""Tests for discord_utils helpers."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import discord
import pytest

from fakes import BOT_USER_ID, http_error, make_member, make_message
from stickerguard.datatypes.discord_datatypes import StickerID
from stickerguard.util import discord_utils


class TestExtractForwardedSnapshot:
    def test_no_snapshot_returns_none(self):
        assert discord_utils.extract_forwarded_snapshot(make_message(snapshot=False)) is None

    def test_wrapped_snapshot_objects(self):
        message = make_message(sticker_ids=[1, 2])

        snapshot = discord_utils.extract_forwarded_snapshot(message)

        assert snapshot.sticker_ids == (StickerID(1), StickerID(2))
        assert snapshot.has_stickers

    def test_unwrapped_snapshot_with_message_snapshots_attribute(self):
        message = SimpleNamespace(
            id=1,
            message_snapshots=[SimpleNamespace(stickers=[SimpleNamespace(id="3")])],
        )

        snapshot = discord_utils.extract_forwarded_snapshot(message)

        assert snapshot.sticker_ids == (StickerID(3),)

    def test_raw_payload_dicts(self):
        message = SimpleNamespace(id=1, snapshots=[{"sticker_items": [{"id": "4"}, {"id": "5"}]}])

        snapshot = discord_utils.extract_forwarded_snapshot(message)

        assert snapshot.sticker_ids == (StickerID(4), StickerID(5))

    def test_duplicate_and_invalid_ids_are_dropped(self):
        message = SimpleNamespace(
            id=1,
            snapshots=[SimpleNamespace(message=SimpleNamespace(stickers=[6, "6", "not-an-id", None, 7]))],
        )

        snapshot = discord_utils.extract_forwarded_snapshot(message)

        assert snapshot.sticker_ids == (StickerID(6), StickerID(7))

    def test_snapshot_without_stickers_is_empty(self):
        snapshot = discord_utils.extract_forwarded_snapshot(make_message(sticker_ids=[]))

        assert snapshot is not None
        assert not snapshot.has_stickers

    def test_unsupported_sticker_container(self):
        message = SimpleNamespace(id=1, snapshots=[SimpleNamespace(stickers=42)])

        snapshot = discord_utils.extract_forwarded_snapshot(message)

        assert not snapshot.has_stickers


class TestDeletability:
    def test_manage_messages_allows_delete(self):
        assert discord_utils.is_message_deletable(make_message()) is True

    def test_missing_manage_messages_blocks_delete(self):
        assert discord_utils.is_message_deletable(make_message(can_manage_messages=False)) is False

    def test_own_message_is_always_deletable(self):
        message = make_message(can_manage_messages=False, author=SimpleNamespace(id=BOT_USER_ID))
        assert discord_utils.is_message_deletable(message) is True

    def test_dm_is_not_deletable(self):
        assert discord_utils.is_message_deletable(make_message(guild_id=None)) is False

    def test_bot_can_manage_messages_without_member(self):
        channel = MagicMock()
        assert discord_utils.bot_can_manage_messages(channel, SimpleNamespace(me=None)) is False
        channel.permissions_for.assert_not_called()


class TestErrors:
    def test_http_error_code_from_discord_exception(self):
        exc = http_error(discord.NotFound, 404, 10060, "Unknown Sticker")

        assert discord_utils.http_error_code(exc) == 10060
        assert discord_utils.http_error_message(exc) == "Unknown Sticker"

    @pytest.mark.parametrize("code", [None, 0, True, "10060"])
    def test_http_error_code_falls_back(self, code):
        exc = RuntimeError("boom")
        exc.code = code

        assert discord_utils.http_error_code(exc) == "UNKNOWN_ERROR"

    def test_http_error_message_falls_back_to_type_name(self):
        assert discord_utils.http_error_message(RuntimeError("boom")) == "boom"
        assert discord_utils.http_error_message(TimeoutError()) == "TimeoutError"


class TestUserMetadata:
    def test_format_user_tag(self):
        assert discord_utils.format_user_tag(None) == "Unknown"
        assert discord_utils.format_user_tag(SimpleNamespace(name="", discriminator="0")) == "Unknown"
        assert discord_utils.format_user_tag(SimpleNamespace(name="alice", discriminator="0")) == "alice"
        assert discord_utils.format_user_tag(SimpleNamespace(name="bob", discriminator="1234")) == "bob#1234"

    def test_avatar_url(self):
        member = make_member()

        url = discord_utils.avatar_url(member)

        member.display_avatar.with_format.assert_called_once_with("png")
        member.display_avatar.with_format.return_value.with_size.assert_called_once_with(2048)
        assert url.endswith("size=2048")

    def test_avatar_url_missing(self):
        assert discord_utils.avatar_url(None) is None
        assert discord_utils.avatar_url(SimpleNamespace(id=1)) is None
