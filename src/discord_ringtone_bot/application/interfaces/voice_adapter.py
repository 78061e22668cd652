"""Port interface for Discord voice operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_ringtone_bot.domain.shared.types import ChannelIdField, GuildIdField

if TYPE_CHECKING:
    from .audio_resolver import AudioStream

PlaybackEndCallback = Callable[[int, str], Awaitable[None]]


class VoiceAdapter(ABC):
    """Interface for Discord voice channel operations."""

    @abstractmethod
    async def connect(self, guild_id: GuildIdField, channel_id: ChannelIdField) -> bool:
        """Connect to a voice channel."""
        ...

    @abstractmethod
    async def disconnect(self, guild_id: GuildIdField) -> bool:
        """Disconnect from voice in a guild."""
        ...

    @abstractmethod
    async def ensure_connected(
        self, guild_id: GuildIdField, channel_id: ChannelIdField, *, self_mute: bool = False
    ) -> bool:
        """Ensure bot is connected to the specified channel, connecting or moving as needed."""
        ...

    @abstractmethod
    async def move_to(self, guild_id: GuildIdField, channel_id: ChannelIdField) -> bool:
        """Move to a different voice channel."""
        ...

    @abstractmethod
    async def set_self_mute(self, guild_id: GuildIdField, muted: bool) -> bool:
        """Set the bot's self-mute flag in the guild's voice connection."""
        ...

    @abstractmethod
    async def play(self, guild_id: GuildIdField, stream: AudioStream) -> bool:
        """Start playing *stream*, replacing whatever is playing."""
        ...

    @abstractmethod
    def set_on_playback_end_callback(self, callback: PlaybackEndCallback) -> None:
        """Set callback invoked with (guild_id, source_ref) when a stream ends."""
        ...
