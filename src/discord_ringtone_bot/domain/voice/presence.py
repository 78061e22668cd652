"""Presence tracking: how many humans are in a voice channel right now.

Counts are always recomputed from a fresh membership snapshot. Presence
events may arrive out of order, twice, or not at all, so an incrementally
maintained counter would drift; a snapshot is self-correcting.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from discord_ringtone_bot.domain.shared.types import UserIdField


class ChannelMember(BaseModel):
    """One occupant of a voice channel."""

    model_config = ConfigDict(frozen=True, strict=True)

    user_id: UserIdField
    is_bot: bool = False


class MembershipSource(ABC):
    """Provides the platform's current member list for a voice channel."""

    @abstractmethod
    def channel_members(self, guild_id: int, channel_id: int) -> list[ChannelMember]:
        """Return the channel's current occupants, or [] if the channel is unknown."""
        ...


def human_occupants(snapshot: Iterable[ChannelMember], bot_user_id: int | None = None) -> int:
    """Count members that are neither the bot itself nor another bot account."""
    return sum(
        1 for member in snapshot if not member.is_bot and member.user_id != bot_user_id
    )


class PresenceTracker:
    def __init__(self, membership_source: MembershipSource, bot_user_id: int | None = None) -> None:
        self._source = membership_source
        self._bot_user_id = bot_user_id

    @property
    def bot_user_id(self) -> int | None:
        return self._bot_user_id

    def set_bot_user_id(self, user_id: int) -> None:
        self._bot_user_id = user_id

    def count_humans(self, guild_id: int, channel_id: int) -> int:
        snapshot = self._source.channel_members(guild_id, channel_id)
        return human_occupants(snapshot, self._bot_user_id)

    def is_bot_user(self, user_id: int) -> bool:
        return self._bot_user_id is not None and user_id == self._bot_user_id
