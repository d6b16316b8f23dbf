"""
Stickerguard - Discord bot enforcing a no foreign stickers policy

Stickerguard watches messages forwarded into a server and removes the ones
carrying stickers that belong to another server, unless the author is allowed
to use external stickers. Every enforcement is written to a log channel.

Core Components:

- **Sticker Resolution**: Looks sticker ids up in local caches, falling back
  to the Discord API, and records every failure as data
- **Policy Engine**: Pure decision over resolved and failed stickers, gated
  by the ``use_external_stickers`` permission (fail-closed)
- **Enforcement**: One deletion attempt per message, errors never escalate
- **Audit Log**: Immutable audit records rendered as embeds in the log channel
- **Interactive Console**: Live status and graceful shutdown

Usage:
    from stickerguard.main import main
    main()
"""
