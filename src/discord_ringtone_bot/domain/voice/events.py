"""Inbound events: voice presence changes and text commands."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from discord_ringtone_bot.domain.shared.types import (
    ChannelIdField,
    GuildIdField,
    NonEmptyStr,
    UserIdField,
)


class VoiceStateEvent(BaseModel):
    """One user's voice channel transition (join, leave or move)."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: GuildIdField
    guild_name: NonEmptyStr
    user_id: UserIdField
    user_name: NonEmptyStr
    user_is_bot: bool = False
    old_channel_id: ChannelIdField | None = None
    new_channel_id: ChannelIdField | None = None

    @property
    def entered(self) -> bool:
        return self.old_channel_id is None and self.new_channel_id is not None

    @property
    def moved(self) -> bool:
        return (
            self.old_channel_id is not None
            and self.new_channel_id is not None
            and self.old_channel_id != self.new_channel_id
        )

    @property
    def left(self) -> bool:
        return self.old_channel_id is not None and self.new_channel_id is None


class CommandKind(Enum):
    JOIN = "join"
    LEAVE = "leave"
    MUTE = "mute"
    UNMUTE = "unmute"
    PLAY = "play"
    PING = "ping"
    HELP = "help"
    UPLOAD = "upload"
    DELETE = "delete"

    @classmethod
    def parse(cls, name: str) -> CommandKind | None:
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class UploadedFile(BaseModel):
    """An attachment carried by a command message."""

    model_config = ConfigDict(frozen=True)

    filename: NonEmptyStr
    data: bytes


class CommandMessage(BaseModel):
    """A parsed text command.

    ``guild_id`` is None when the command came from a DM or group chat.
    ``author_voice_channel_id`` is the author's current voice channel, as
    seen by the gateway when the command was received.
    """

    model_config = ConfigDict(frozen=True)

    guild_id: GuildIdField | None = None
    guild_name: str = ""
    channel_id: ChannelIdField
    author_id: UserIdField
    author_name: NonEmptyStr
    author_voice_channel_id: ChannelIdField | None = None
    command: CommandKind
    args: tuple[str, ...] = ()
    attachments: tuple[UploadedFile, ...] = Field(default_factory=tuple)
