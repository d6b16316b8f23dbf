"""
Pytest configuration and fixtures for Stickerguard tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from fakes import BOT_USER_ID, LOG_CHANNEL_ID  # noqa: E402


@pytest.fixture
def fake_bot():
    return SimpleNamespace(
        user=SimpleNamespace(id=BOT_USER_ID),
        get_sticker=MagicMock(return_value=None),
        fetch_sticker=AsyncMock(),
        get_channel=MagicMock(return_value=None),
        fetch_channel=AsyncMock(),
        guilds=[],
    )


@pytest.fixture
def log_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = LOG_CHANNEL_ID
    channel.name = "sticker-log"
    channel.send = AsyncMock()
    return channel
