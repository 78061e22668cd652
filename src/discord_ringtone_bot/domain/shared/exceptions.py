"""Base exception classes for domain-level errors."""

from __future__ import annotations

from enum import Enum

from discord_ringtone_bot.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class UserInputError(DomainError):
    """Raised for malformed arguments or a command issued in the wrong context."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="USER_INPUT_ERROR")
        self.field = field


class SessionStateError(DomainError):
    """Raised when a command needs a voice session that does not exist."""

    def __init__(self, guild_id: int, message: str) -> None:
        super().__init__(message, code="SESSION_STATE_ERROR")
        self.guild_id = guild_id


class JoinError(DomainError):
    """Raised when the voice transport cannot establish a connection."""

    def __init__(self, guild_id: int, channel_id: int, message: str | None = None) -> None:
        msg = message or ErrorMessages.JOIN_FAILED.format(
            guild_id=guild_id, channel_id=channel_id
        )
        super().__init__(msg, code="JOIN_ERROR")
        self.guild_id = guild_id
        self.channel_id = channel_id


class ResolveErrorKind(Enum):
    """Why an audio identifier could not be turned into a stream."""

    NOT_FOUND = "not_found"
    NETWORK_FAILURE = "network_failure"
    UNSUPPORTED_FORMAT = "unsupported_format"


class ResolveError(DomainError):
    """Raised by audio resolvers."""

    def __init__(self, kind: ResolveErrorKind, identifier: str, message: str | None = None) -> None:
        super().__init__(message or f"{kind.value}: {identifier}", code="RESOLVE_ERROR")
        self.kind = kind
        self.identifier = identifier

    @classmethod
    def not_found(cls, identifier: str) -> ResolveError:
        return cls(
            ResolveErrorKind.NOT_FOUND,
            identifier,
            ErrorMessages.RESOLVE_NOT_FOUND.format(identifier=identifier),
        )

    @classmethod
    def network_failure(cls, identifier: str, reason: str) -> ResolveError:
        return cls(
            ResolveErrorKind.NETWORK_FAILURE,
            identifier,
            ErrorMessages.RESOLVE_NETWORK_FAILURE.format(identifier=identifier, reason=reason),
        )

    @classmethod
    def unsupported_format(cls, identifier: str) -> ResolveError:
        return cls(
            ResolveErrorKind.UNSUPPORTED_FORMAT,
            identifier,
            ErrorMessages.RESOLVE_UNSUPPORTED_FORMAT.format(identifier=identifier),
        )


class RegistryInvariantError(DomainError):
    """A session the registry guarantees to exist is missing.

    This is a programming defect; callers that catch it log it as critical.
    """

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or ErrorMessages.SESSION_MISSING.format(guild_id=guild_id)
        super().__init__(msg, code="REGISTRY_INVARIANT")
        self.guild_id = guild_id


class RingtoneStorageError(DomainError):
    """Raised when a ringtone file cannot be stored or removed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message, code="RINGTONE_STORAGE_ERROR")
        self.path = path
