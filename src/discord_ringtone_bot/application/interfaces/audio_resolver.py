"""Port interface for resolving audio identifiers to playable streams."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from discord_ringtone_bot.domain.shared.types import NonEmptyStr
from discord_ringtone_bot.domain.voice.value_objects import AudioIdentifier


class AudioStream(BaseModel):
    """A playable stream handle.

    ``location`` is whatever FFmpeg accepts as input: a local file path or a
    direct media URL. ``source_ref`` identifies the logical source and is
    what a session records as playing.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    source_ref: NonEmptyStr
    location: NonEmptyStr
    title: NonEmptyStr
    before_options: str = ""
    options: str = "-vn"


class AudioResolver(ABC):
    """Interface for turning a greeting reference or URL into a playable stream."""

    @abstractmethod
    async def resolve(self, identifier: AudioIdentifier) -> AudioStream:
        """Resolve *identifier*.

        Raises:
            ResolveError: with kind NOT_FOUND, NETWORK_FAILURE or UNSUPPORTED_FORMAT.
        """
        ...
