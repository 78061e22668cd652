"""AudioResolver implementation for users' stored greeting files."""

from __future__ import annotations

import asyncio
import glob
import logging
from pathlib import Path

from discord_ringtone_bot.application.interfaces.audio_resolver import AudioResolver, AudioStream
from discord_ringtone_bot.config.settings import RingtoneSettings
from discord_ringtone_bot.domain.shared.exceptions import ResolveError
from discord_ringtone_bot.domain.shared.messages import LogTemplates
from discord_ringtone_bot.domain.shared.validators import is_safe_path_component
from discord_ringtone_bot.domain.voice.value_objects import AudioIdentifier, GreetingRef

logger = logging.getLogger(__name__)


def greeting_path(root: Path, guild_name: str, user_name: str, extension: str) -> Path:
    """``<root>/<guild_name>/<user_name>.<extension>``, not checked for existence."""
    return root / guild_name / f"{user_name}.{extension}"


class RingtoneResolver(AudioResolver):
    """Resolves ``GreetingRef`` to the file stored for that guild and user.

    Guild and user names come straight from Discord, so anything that is not
    a plain single path component, or that would resolve outside the root,
    is treated as not found.
    """

    def __init__(self, settings: RingtoneSettings | None = None) -> None:
        self._settings = settings or RingtoneSettings()
        self._root = Path(self._settings.directory)

    @property
    def root(self) -> Path:
        return self._root

    def _locate(self, ref: GreetingRef) -> Path:
        identifier = str(ref)
        if not (is_safe_path_component(ref.guild_name) and is_safe_path_component(ref.user_name)):
            raise ResolveError.not_found(identifier)

        path = greeting_path(self._root, ref.guild_name, ref.user_name, self._settings.extension)
        root = self._root.resolve()
        resolved = path.resolve()
        if not resolved.is_relative_to(root):
            raise ResolveError.not_found(identifier)

        if not resolved.is_file():
            if self._has_other_format(path):
                raise ResolveError.unsupported_format(identifier)
            raise ResolveError.not_found(identifier)
        if resolved.suffix.lower() != f".{self._settings.extension}":
            raise ResolveError.unsupported_format(identifier)
        return resolved

    @staticmethod
    def _has_other_format(path: Path) -> bool:
        """True when the user has a greeting stored under a different extension."""
        pattern = f"{glob.escape(path.stem)}.*"
        return any(candidate.is_file() for candidate in path.parent.glob(pattern))

    async def resolve(self, identifier: AudioIdentifier) -> AudioStream:
        if not isinstance(identifier, GreetingRef):
            raise ResolveError.unsupported_format(str(identifier))

        path = await asyncio.to_thread(self._locate, identifier)
        logger.debug(LogTemplates.RINGTONE_RESOLVED, identifier, path)

        return AudioStream(
            source_ref=f"greeting:{identifier}",
            location=str(path),
            title=str(identifier),
        )
