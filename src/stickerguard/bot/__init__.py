"""
Discord bot wiring for Stickerguard.

- **cogs/message_listener.py**: Feeds ``on_message`` events into the sticker
  policy pipeline

- **cogs/events_listener.py**: Bot lifecycle (``on_ready``, resumes), presence,
  early log channel resolution and client error logging
"""
