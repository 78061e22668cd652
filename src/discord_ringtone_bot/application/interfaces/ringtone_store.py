"""Port interface for storing users' greeting files."""

from __future__ import annotations

from abc import ABC, abstractmethod


class RingtoneStore(ABC):
    """Stores one greeting file per (guild name, user name)."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension (without dot) greetings are stored with."""
        ...

    @abstractmethod
    async def save(self, guild_name: str, user_name: str, filename: str, data: bytes) -> str:
        """Store *data* as the user's greeting; returns the display path.

        Raises:
            UserInputError: wrong file type or file too large.
            RingtoneStorageError: the file could not be written.
        """
        ...

    @abstractmethod
    async def delete(self, guild_name: str, user_name: str) -> str:
        """Remove the user's greeting; returns the display path.

        Raises:
            UserInputError: no greeting stored for the user.
            RingtoneStorageError: the file could not be removed.
        """
        ...

    @abstractmethod
    def exists(self, guild_name: str, user_name: str) -> bool:
        ...
