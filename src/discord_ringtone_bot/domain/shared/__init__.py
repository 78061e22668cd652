"""
Shared Domain Kernel

Contains types, messages and exceptions shared across the app.
"""

from discord_ringtone_bot.domain.shared.exceptions import (
    DomainError,
    JoinError,
    RegistryInvariantError,
    ResolveError,
    ResolveErrorKind,
    RingtoneStorageError,
    SessionStateError,
    UserInputError,
)

__all__ = [
    "DomainError",
    "UserInputError",
    "SessionStateError",
    "JoinError",
    "ResolveError",
    "ResolveErrorKind",
    "RegistryInvariantError",
    "RingtoneStorageError",
]
