"""Core domain entities for the voice bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from discord_ringtone_bot.domain.shared.datetime_utils import utcnow
from discord_ringtone_bot.domain.shared.types import (
    ChannelIdField,
    GuildIdField,
    UtcDatetimeField,
)
from discord_ringtone_bot.domain.voice.value_objects import Playback


class VoiceSession(BaseModel):
    """The bot's connection to one voice channel of a guild.

    Instances are owned by the session registry; everything outside the
    registry works on copies.
    """

    model_config = ConfigDict(strict=True, validate_assignment=True)

    guild_id: GuildIdField
    channel_id: ChannelIdField
    muted: bool = False
    playback: Playback = Field(default_factory=Playback.idle)
    connected_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def is_playing(self) -> bool:
        return self.playback.is_playing

    def move_to(self, channel_id: int) -> int:
        """Point the session at *channel_id*; returns the previous channel."""
        previous = self.channel_id
        self.channel_id = channel_id
        return previous

    def set_muted(self, muted: bool) -> bool:
        """Set the mute flag; returns False when it already had that value."""
        if self.muted == muted:
            return False
        self.muted = muted
        return True

    def start_playback(self, source_ref: str) -> None:
        self.playback = Playback.playing(source_ref)

    def finish_playback(self, source_ref: str) -> bool:
        """Return to idle if *source_ref* is still what is playing."""
        if self.playback.source_ref != source_ref:
            return False
        self.playback = Playback.idle()
        return True
