"""File-system storage for users' greeting files."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import tempfile
from pathlib import Path, PurePosixPath

from discord_ringtone_bot.application.interfaces.ringtone_store import RingtoneStore
from discord_ringtone_bot.config.settings import RingtoneSettings
from discord_ringtone_bot.domain.shared.exceptions import RingtoneStorageError, UserInputError
from discord_ringtone_bot.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_ringtone_bot.domain.shared.validators import is_safe_path_component
from discord_ringtone_bot.infrastructure.audio.ringtone_resolver import greeting_path

logger = logging.getLogger(__name__)


class FileRingtoneStore(RingtoneStore):
    """Stores greetings as ``<directory>/<guild_name>/<user_name>.<ext>``.

    Writes go to a temporary sibling first and are renamed into place, so a
    greeting being played is never observed half-written.
    """

    def __init__(self, settings: RingtoneSettings | None = None) -> None:
        self._settings = settings or RingtoneSettings()
        self._root = Path(self._settings.directory)

    @property
    def extension(self) -> str:
        return self._settings.extension

    @property
    def root(self) -> Path:
        return self._root

    def _display_path(self, guild_name: str, user_name: str) -> str:
        return str(PurePosixPath(guild_name) / f"{user_name}.{self.extension}")

    def _path_for(self, guild_name: str, user_name: str) -> Path:
        if not (is_safe_path_component(guild_name) and is_safe_path_component(user_name)):
            raise UserInputError(DiscordUIMessages.RINGTONE_NOT_FOUND)
        return greeting_path(self._root, guild_name, user_name, self.extension)

    def exists(self, guild_name: str, user_name: str) -> bool:
        try:
            return self._path_for(guild_name, user_name).is_file()
        except UserInputError:
            return False

    async def save(self, guild_name: str, user_name: str, filename: str, data: bytes) -> str:
        if PurePosixPath(filename).suffix.lower() != f".{self.extension}":
            raise UserInputError(
                DiscordUIMessages.RINGTONE_BAD_EXTENSION.format(extension=self.extension),
                field="filename",
            )
        limit = self._settings.max_upload_bytes
        if len(data) > limit:
            raise UserInputError(
                DiscordUIMessages.RINGTONE_TOO_LARGE.format(limit_kb=limit // 1024),
                field="filename",
            )

        path = self._path_for(guild_name, user_name)
        display = self._display_path(guild_name, user_name)
        await asyncio.to_thread(self._write, path, data, display)
        logger.info(LogTemplates.RINGTONE_SAVED, display)
        return display

    async def delete(self, guild_name: str, user_name: str) -> str:
        path = self._path_for(guild_name, user_name)
        display = self._display_path(guild_name, user_name)
        await asyncio.to_thread(self._remove, path, display)
        logger.info(LogTemplates.RINGTONE_DELETED, display)
        return display

    @staticmethod
    def _write(path: Path, data: bytes, display: str) -> None:
        tmp: Path | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            tmp = Path(tmp_name)
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, path)
        except OSError as exc:
            logger.warning(LogTemplates.RINGTONE_IO_FAILED, display, exc)
            if tmp is not None:
                with contextlib.suppress(OSError):
                    tmp.unlink()
            raise RingtoneStorageError(display, DiscordUIMessages.RINGTONE_SAVE_FAILED) from exc

    @staticmethod
    def _remove(path: Path, display: str) -> None:
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise UserInputError(DiscordUIMessages.RINGTONE_NOT_FOUND) from exc
        except OSError as exc:
            logger.warning(LogTemplates.RINGTONE_IO_FAILED, display, exc)
            raise RingtoneStorageError(display, DiscordUIMessages.RINGTONE_DELETE_FAILED) from exc
