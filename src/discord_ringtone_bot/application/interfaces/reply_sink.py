"""Port interface for sending replies back to a text channel."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ReplySink(ABC):
    @abstractmethod
    async def send(self, channel_id: int, text: str) -> bool:
        """Send *text* to *channel_id*.

        Best effort: implementations log failures and return False instead of
        raising. Nothing is retried.
        """
        ...
