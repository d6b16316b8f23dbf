"""
Stickerguard Discord Bot
========================

A Discord bot that removes forwarded messages carrying stickers from other
servers and records every enforcement in a log channel.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. STICKERGUARD_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("STICKERGUARD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord

from stickerguard.bot.cogs import events_listener, message_listener
from stickerguard.configuration.app_configuration import AppConfig, EnvironmentConfig, app_config, load_environment
from stickerguard.moderation.audit_log import AuditLogEmitter, LogChannelCache
from stickerguard.moderation.sticker_pipeline import StickerPolicyPipeline
from stickerguard.ui.console import ConsoleControl, close_bot_instance, console_session
from stickerguard.util.logger import get_logger, handle_exception


logger = get_logger("main")


def build_intents() -> discord.Intents:
    """Construct the Discord intents the sticker pipeline relies on.

    Returns
    -------
    discord.Intents
        Intents enabling guild, message content, member and sticker events.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.messages = True
    intents.message_content = True
    intents.members = True
    intents.emojis_and_stickers = True
    return intents


def create_bot(env_config: EnvironmentConfig, settings: AppConfig) -> tuple[discord.Bot, LogChannelCache]:
    """Instantiate the Discord bot, the sticker pipeline and register all cogs."""
    bot = discord.Bot(intents=build_intents())

    log_channel_cache = LogChannelCache(bot, env_config.log_channel_id)
    emitter = AuditLogEmitter(
        log_channel_cache,
        accent_color=settings.audit_accent_color,
        title=settings.audit_title,
    )
    pipeline = StickerPolicyPipeline(
        bot,
        emitter,
        alert_mention=env_config.alert_mention or settings.alert_mention,
    )

    events_listener.setup(bot, log_channel_cache)
    message_listener.setup(bot, pipeline)
    logger.info("All cogs loaded successfully.")

    return bot, log_channel_cache


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Connect the bot and keep it running until it is closed."""
    logger.info("[STARTUP] Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def run_bot_session(bot: discord.Bot, token: str, control: ConsoleControl, console_enabled: bool = True) -> int:
    """Run the bot alongside the console, returning an exit code."""
    control.set_bot(bot)
    exit_code = 0

    try:
        async with console_session(control, enabled=console_enabled):
            try:
                await start_bot(bot, token)
            except discord.LoginFailure as exc:
                logger.critical("[LOGIN] Failed to login to Discord: %s", exc)
                logger.critical("[LOGIN] Please verify your BOT_TOKEN is correct")
                exit_code = 1
            except Exception as exc:
                logger.critical("Discord bot runtime error: %s", exc)
                exit_code = 1
    finally:
        control.set_bot(None)
        await close_bot_instance(bot, log_close=True)
        logger.info("Shutdown complete.")

    return exit_code


async def async_main() -> int:
    """Bootstrap configuration, the bot and the console, returning an exit code."""
    env_config = load_environment(BASE_DIR / ".env")

    try:
        bot, log_channel_cache = create_bot(env_config, app_config)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    control = ConsoleControl(log_channel_cache)
    return await run_bot_session(bot, env_config.token, control, console_enabled=app_config.console_enabled)


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("[STARTUP] Initializing bot...")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
