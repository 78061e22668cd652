"""Discord voice adapter implementing VoiceAdapter for connection and playback."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_ringtone_bot.application.interfaces.voice_adapter import (
    PlaybackEndCallback,
    VoiceAdapter,
)
from discord_ringtone_bot.config.settings import AudioSettings, VoiceSettings
from discord_ringtone_bot.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ....application.interfaces.audio_resolver import AudioStream

logger = logging.getLogger(__name__)

VoiceChannelLike = discord.VoiceChannel | discord.StageChannel


class DiscordVoiceAdapter(VoiceAdapter):
    """One ``discord.VoiceClient`` per guild, found through the guild itself.

    Transport failures are logged and reported as ``False``; nothing here
    raises into the session service.
    """

    def __init__(
        self,
        bot: discord.Client,
        audio_settings: AudioSettings | None = None,
        voice_settings: VoiceSettings | None = None,
    ) -> None:
        self._bot = bot
        self._audio = audio_settings or AudioSettings()
        self._voice = voice_settings or VoiceSettings()
        self._volume = self._audio.default_volume
        self._on_playback_end: PlaybackEndCallback | None = None
        self._current_stream: dict[int, AudioStream] = {}
        self._self_mute: dict[int, bool] = {}

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _get_voice_channel(self, guild_id: int, channel_id: int) -> VoiceChannelLike | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            return None

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, VoiceChannelLike):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            return None
        return channel

    async def connect(self, guild_id: int, channel_id: int) -> bool:
        channel = self._get_voice_channel(guild_id, channel_id)
        if channel is None:
            return False

        try:
            async with asyncio.timeout(self._voice.connect_timeout_s):
                await channel.connect(
                    self_deaf=self._voice.self_deaf,
                    self_mute=self._self_mute.get(guild_id, False),
                )
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name, channel.guild.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except Exception:
            logger.exception(LogTemplates.VOICE_CONNECT_FAILED)
            return False

    async def disconnect(self, guild_id: int) -> bool:
        self._current_stream.pop(guild_id, None)
        self._self_mute.pop(guild_id, None)

        vc = self._get_voice_client(guild_id)
        if not vc:
            return True

        try:
            await vc.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
            return True
        except Exception:
            logger.exception(LogTemplates.VOICE_DISCONNECT_FAILED)
            return False

    async def ensure_connected(
        self, guild_id: int, channel_id: int, *, self_mute: bool = False
    ) -> bool:
        """Connect if not connected, move if in a different channel."""
        self._self_mute[guild_id] = self_mute
        vc = self._get_voice_client(guild_id)

        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            self._self_mute[guild_id] = self_mute
            vc = None

        if vc and vc.channel:
            if vc.channel.id == channel_id:
                return True
            return await self.move_to(guild_id, channel_id)

        return await self.connect(guild_id, channel_id)

    async def move_to(self, guild_id: int, channel_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            return await self.connect(guild_id, channel_id)

        channel = self._get_voice_channel(guild_id, channel_id)
        if channel is None:
            return False

        try:
            async with asyncio.timeout(self._voice.connect_timeout_s):
                await vc.move_to(channel)
            await self._apply_voice_flags(channel)
            logger.info(LogTemplates.VOICE_MOVED, channel.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_MOVE_TIMEOUT, channel_id)
            return False
        except Exception:
            logger.exception(LogTemplates.VOICE_MOVE_FAILED)
            return False

    async def _apply_voice_flags(self, channel: VoiceChannelLike) -> bool:
        guild = channel.guild
        try:
            await guild.change_voice_state(
                channel=channel,
                self_mute=self._self_mute.get(guild.id, False),
                self_deaf=self._voice.self_deaf,
            )
            return True
        except Exception as exc:
            logger.warning(LogTemplates.VOICE_STATE_CHANGE_FAILED, guild.id, exc)
            return False

    async def set_self_mute(self, guild_id: int, muted: bool) -> bool:
        self._self_mute[guild_id] = muted
        vc = self._get_voice_client(guild_id)
        if not vc or not isinstance(vc.channel, VoiceChannelLike):
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            return False
        return await self._apply_voice_flags(vc.channel)

    async def play(self, guild_id: int, stream: AudioStream) -> bool:
        vc = self._get_voice_client(guild_id)
        if not vc:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            return False

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        try:
            source = discord.FFmpegPCMAudio(
                stream.location,
                before_options=stream.before_options or None,
                options=stream.options or None,
            )
            volume_source = discord.PCMVolumeTransformer(source, volume=self._volume)
            self._current_stream[guild_id] = stream

            def after_callback(error: Exception | None = None) -> None:
                logger.info(LogTemplates.PLAYBACK_ENDED, stream.title, guild_id, error)
                if error:
                    logger.warning(LogTemplates.PLAYBACK_ERROR, guild_id, error)

                asyncio.run_coroutine_threadsafe(
                    self._handle_stream_end(guild_id, stream),
                    self._bot.loop,
                )

            vc.play(volume_source, after=after_callback)
            logger.info(LogTemplates.PLAYBACK_STARTED, stream.title, guild_id)
            return True

        except discord.ClientException as e:
            self._current_stream.pop(guild_id, None)
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except Exception as e:
            self._current_stream.pop(guild_id, None)
            logger.error(LogTemplates.PLAYBACK_FAILED_START, e)
            return False

    def set_on_playback_end_callback(self, callback: PlaybackEndCallback) -> None:
        self._on_playback_end = callback

    async def _handle_stream_end(self, guild_id: int, stream: AudioStream) -> None:
        """Runs on the bot loop, scheduled from FFmpeg's thread.

        A stream replaced by a newer one also ends; only the stream that is
        still current for the guild is reported.
        """
        if self._current_stream.get(guild_id) is not stream:
            return
        self._current_stream.pop(guild_id, None)

        if self._on_playback_end is None:
            return
        try:
            await self._on_playback_end(guild_id, stream.source_ref)
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_CALLBACK_ERROR, guild_id, e)
