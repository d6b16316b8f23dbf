"""
Type-safe wrappers for Discord identifiers.

Discord snowflakes are 64-bit integers but travel as strings in JSON payloads
and log lines. The wrappers below keep the value as a normalized string, accept
``int``/``str``/same-type input, and compare equal to the raw forms so callers
can pass whatever the Discord client handed them.
"""

from __future__ import annotations

from typing import Any, Union


class Snowflake:
    """
    Base class for a single kind of Discord snowflake ID.

    Two wrappers compare equal only when they are of the same kind, so a
    ``GuildID`` never accidentally matches a ``StickerID`` with the same value.

    Example:
        >>> gid = GuildID(123456789012345678)
        >>> str(gid)
        '123456789012345678'
        >>> gid == "123456789012345678"
        True
        >>> gid.to_int()
        123456789012345678
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        if isinstance(value, Snowflake):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        elif isinstance(value, int):
            self._value = str(value)
        elif isinstance(value, str):
            # Validate that it's a valid integer string
            self._value = str(int(value.strip()))
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    @classmethod
    def from_object(cls, obj: Any):
        """Create an ID from any Discord model exposing an ``id`` attribute."""
        return cls(obj.id)

    @classmethod
    def optional(cls, value: Any):
        """Wrap ``value`` or return None when it is missing or not a snowflake."""
        if value is None:
            return None
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class GuildID(Snowflake):
    """Snowflake of a Discord guild (server)."""

    __slots__ = ()


class ChannelID(Snowflake):
    """Snowflake of a guild channel or thread."""

    __slots__ = ()


class MessageID(Snowflake):
    """Snowflake of a message."""

    __slots__ = ()


class UserID(Snowflake):
    """Snowflake of a user or guild member."""

    __slots__ = ()


class StickerID(Snowflake):
    """Snowflake of a guild or standard sticker."""

    __slots__ = ()
