"""Shared validators for domain models and command arguments.

This module provides reusable validators for common validation patterns,
particularly for Discord snowflake IDs and user-supplied source references.
"""

from pathlib import Path

from discord_ringtone_bot.domain.shared.messages import ErrorMessages

REMOTE_SOURCE_SCHEME_MARKER = "http"


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers representing unique
    identifiers for users, guilds, channels, messages, etc.

    Args:
        value: The snowflake ID to validate.

    Returns:
        The validated snowflake ID.

    Raises:
        ValueError: If the snowflake ID is invalid.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def is_remote_source(value: str) -> bool:
    """Return True when *value* looks like a remote source reference.

    Only the scheme marker is checked; the resolver decides whether the URL
    actually points at playable audio.
    """
    return value.startswith(REMOTE_SOURCE_SCHEME_MARKER)


def is_safe_path_component(value: str) -> bool:
    """Return True if *value* can be used as a single file or directory name."""
    if not value or value in {".", ".."}:
        return False
    if "\x00" in value:
        return False
    return Path(value).name == value and "/" not in value and "\\" not in value
