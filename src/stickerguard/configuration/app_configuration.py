from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import fcntl
import os
import sys
from typing import Any, Dict
import yaml
from dotenv import load_dotenv

from stickerguard.datatypes.discord_datatypes import ChannelID
from stickerguard.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

REQUIRED_ENV_VARS = ("BOT_TOKEN", "LOG_CHANNEL_ID")

DEFAULT_ACCENT_COLOR = 0xF97316
DEFAULT_AUDIT_TITLE = "Sticker Bypassing Detected"


@dataclass(frozen=True, slots=True)
class EnvironmentConfig:
    """Secrets and identifiers read from the process environment."""

    token: str
    log_channel_id: ChannelID
    alert_mention: str | None = None


def read_environment(env: Dict[str, str] | None = None) -> tuple[EnvironmentConfig | None, list[str]]:
    """Read the bot environment without side effects.

    Returns
    -------
    tuple[EnvironmentConfig | None, list[str]]
        The parsed configuration and an empty list, or ``None`` and the
        names of the variables that are missing or invalid.
    """
    env = os.environ if env is None else env
    problems = [name for name in REQUIRED_ENV_VARS if not (env.get(name) or "").strip()]
    if problems:
        return None, problems

    log_channel_id = ChannelID.optional(env["LOG_CHANNEL_ID"])
    if log_channel_id is None:
        return None, ["LOG_CHANNEL_ID"]

    alert_mention = (env.get("ALERT_MENTION") or "").strip() or None
    return EnvironmentConfig(
        token=env["BOT_TOKEN"].strip(),
        log_channel_id=log_channel_id,
        alert_mention=alert_mention,
    ), []


def load_environment(dotenv_path: Path | None = None) -> EnvironmentConfig:
    """Load ``.env`` and validate the required variables.

    Raises
    ------
    SystemExit
        With status 1 when ``BOT_TOKEN`` or ``LOG_CHANNEL_ID`` is missing or invalid.
    """
    load_dotenv(dotenv_path=dotenv_path)
    config, problems = read_environment()
    if config is None:
        logger.critical("[CONFIG ERROR] Missing or invalid environment variables: %s", ", ".join(problems))
        logger.critical("[CONFIG ERROR] Please check your .env file and ensure all required variables are set")
        sys.exit(1)

    logger.info("[CONFIG] ✓ Configuration validated successfully")
    return config


class AppConfig:
    """File-lock based accessor around the optional YAML tuning file.

    The class caches contents of ``./config/app_config.yml`` and exposes the
    audit card and console settings with defaults, so a missing file simply
    means default behavior.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.debug("[APP CONFIGURATION] Config file %s not found, using defaults.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s must be a mapping, got %s", self.config_path, type(data).__name__)
            return {}
        return data

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping (empty on error)."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def audit_accent_color(self) -> int:
        """Side color of the audit embeds. Accepts ints or hex strings like ``"#F97316"``."""
        value = self._section("audit_log").get("accent_color", DEFAULT_ACCENT_COLOR)
        if isinstance(value, bool):
            return DEFAULT_ACCENT_COLOR
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip().lstrip("#").removeprefix("0x"), 16)
        except ValueError:
            logger.warning("[APP CONFIGURATION] Invalid audit_log.accent_color %r, using default", value)
            return DEFAULT_ACCENT_COLOR

    @property
    def audit_title(self) -> str:
        value = self._section("audit_log").get("title")
        return str(value) if value else DEFAULT_AUDIT_TITLE

    @property
    def alert_mention(self) -> str | None:
        """Mention configured in the YAML file; the ``ALERT_MENTION`` env var takes precedence."""
        value = self._section("audit_log").get("alert_mention")
        return str(value).strip() or None if value else None

    @property
    def console_enabled(self) -> bool:
        value = self._section("console").get("enabled", True)
        return bool(value)


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
