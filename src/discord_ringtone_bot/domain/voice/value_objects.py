"""Immutable value objects for the voice bounded context."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from discord_ringtone_bot.domain.shared.types import NonEmptyStr


class Playback(BaseModel):
    """What a session is playing: nothing, or one source."""

    model_config = ConfigDict(frozen=True, strict=True)

    source_ref: NonEmptyStr | None = None

    @classmethod
    def idle(cls) -> Playback:
        return cls()

    @classmethod
    def playing(cls, source_ref: str) -> Playback:
        return cls(source_ref=source_ref)

    @property
    def is_playing(self) -> bool:
        return self.source_ref is not None


class GreetingRef(BaseModel):
    """Identifies a user's greeting by guild and user display names."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_name: NonEmptyStr
    user_name: NonEmptyStr

    def __str__(self) -> str:
        return f"{self.guild_name}/{self.user_name}"


class RemoteSourceRef(BaseModel):
    """A user-supplied remote audio URL."""

    model_config = ConfigDict(frozen=True, strict=True)

    url: NonEmptyStr

    def __str__(self) -> str:
        return self.url


AudioIdentifier = GreetingRef | RemoteSourceRef


class VoiceTransition(Enum):
    """Outcome of feeding one presence event to the state machine."""

    NONE = "none"
    JOINED = "joined"
    MOVED = "moved"
    LEFT = "left"


class MuteOutcome(Enum):
    MUTED = "muted"
    ALREADY_MUTED = "already_muted"
    UNMUTED = "unmuted"
    ALREADY_UNMUTED = "already_unmuted"
