"""
Utility functions and helpers for Stickerguard.

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Silences Discord
  networking internals. Uses prompt_toolkit for non-blocking console I/O.

- **discord_utils.py**: Stateless Discord helpers: forwarded snapshot parsing,
  deletability checks, HTTP error code extraction and author metadata.
"""
