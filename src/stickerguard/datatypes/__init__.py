"""
Typed data shared across the sticker pipeline.

- **discord_datatypes.py**: Snowflake wrappers (guild, channel, message, user, sticker).
- **sticker_datatypes.py**: Forwarded snapshots and sticker resolution results.
- **policy_datatypes.py**: Permission, policy, enforcement, audit and emission values.
"""
