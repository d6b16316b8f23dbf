"""
User interface components for Stickerguard.

- **audit_embed.py**: Renders audit records as log channel embeds.

- **console.py**: Interactive operator console for the live bot with status
  checks, guild listing and graceful shutdown.
"""
