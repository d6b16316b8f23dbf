"""
Sticker policy moderation.

- **sticker_resolver**: resolves forwarded sticker ids to their origin guild
- **permission_oracle**: checks the ``use_external_stickers`` bypass permission
- **policy_engine**: pure violation decision and enforcement gate
- **enforcement**: single-attempt message deletion
- **audit_log**: audit record builder, log channel cache and emitter
- **sticker_pipeline**: wires the stages together for ``on_message``
"""
