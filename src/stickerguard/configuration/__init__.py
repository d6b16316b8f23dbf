"""
Configuration management for Stickerguard.

- **app_configuration.py**: Loads and validates the process environment
  (``BOT_TOKEN``, ``LOG_CHANNEL_ID``, optional ``ALERT_MENTION``) via
  python-dotenv, and reads the optional YAML tuning file for the audit card
  and the operator console. Falls back to defaults on a missing or malformed
  file.
"""
