"""
Unit Tests for DiscordVoiceAdapter

Tests for:
- connect() joining with the configured deafen/mute flags and timeouts
- ensure_connected() reusing, moving or replacing voice clients
- set_self_mute() applying the flag through the guild's voice state
- play() building an FFmpeg source and reporting only the current stream's end, once
- Failures reported as False instead of raised
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from discord_ringtone_bot.application.interfaces.audio_resolver import AudioStream
from discord_ringtone_bot.config.settings import AudioSettings, VoiceSettings
from discord_ringtone_bot.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

GUILD = 123
CHANNEL = 456
OTHER_CHANNEL = 789

VA_MODULE = "discord_ringtone_bot.infrastructure.discord.adapters.voice_adapter"


def make_channel(channel_id, guild):
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = channel_id
    channel.name = f"voice-{channel_id}"
    channel.guild = guild
    channel.connect = AsyncMock()
    return channel


def make_voice_client(channel, *, connected=True, playing=False):
    vc = MagicMock(spec=discord.VoiceClient)
    vc.channel = channel
    vc.is_connected.return_value = connected
    vc.is_playing.return_value = playing
    vc.is_paused.return_value = False
    vc.disconnect = AsyncMock()
    vc.move_to = AsyncMock()
    return vc


@pytest.fixture
def guild():
    guild = MagicMock()
    guild.id = GUILD
    guild.name = "guild"
    guild.voice_client = None
    guild.change_voice_state = AsyncMock()
    return guild


@pytest.fixture
def channels(guild):
    by_id = {
        CHANNEL: make_channel(CHANNEL, guild),
        OTHER_CHANNEL: make_channel(OTHER_CHANNEL, guild),
    }
    guild.get_channel.side_effect = by_id.get
    return by_id


@pytest.fixture
def bot(guild):
    bot = MagicMock()
    bot.get_guild.side_effect = lambda guild_id: guild if guild_id == GUILD else None
    return bot


@pytest.fixture
def adapter(bot):
    return DiscordVoiceAdapter(bot, AudioSettings(), VoiceSettings(connect_timeout_s=1.0))


@pytest.fixture
def stream():
    return AudioStream(
        source_ref="greeting:guild/alice",
        location="/tmp/guild/alice.mp3",
        title="guild/alice",
    )


class TestConnect:
    async def test_connect_joins_self_deafened(self, adapter, channels):
        ok = await adapter.connect(GUILD, CHANNEL)

        assert ok is True
        channels[CHANNEL].connect.assert_awaited_once_with(self_deaf=True, self_mute=False)

    async def test_unknown_guild(self, adapter):
        assert await adapter.connect(999, CHANNEL) is False

    async def test_text_channel_is_rejected(self, adapter, guild, channels):
        guild.get_channel.side_effect = lambda _id: MagicMock(spec=discord.TextChannel)

        assert await adapter.connect(GUILD, CHANNEL) is False

    async def test_forbidden(self, adapter, channels):
        channels[CHANNEL].connect.side_effect = discord.Forbidden(MagicMock(status=403), "no")

        assert await adapter.connect(GUILD, CHANNEL) is False

    async def test_timeout(self, bot, channels):
        adapter = DiscordVoiceAdapter(bot, voice_settings=VoiceSettings(connect_timeout_s=0.01))

        async def hang(**_kwargs):
            await asyncio.sleep(1)

        channels[CHANNEL].connect.side_effect = hang

        assert await adapter.connect(GUILD, CHANNEL) is False


class TestEnsureConnected:
    async def test_connects_with_mute_flag(self, adapter, channels):
        ok = await adapter.ensure_connected(GUILD, CHANNEL, self_mute=True)

        assert ok is True
        channels[CHANNEL].connect.assert_awaited_once_with(self_deaf=True, self_mute=True)

    async def test_same_channel_is_noop(self, adapter, guild, channels):
        vc = make_voice_client(channels[CHANNEL])
        guild.voice_client = vc

        assert await adapter.ensure_connected(GUILD, CHANNEL) is True
        vc.move_to.assert_not_awaited()
        channels[CHANNEL].connect.assert_not_awaited()

    async def test_moves_and_reapplies_flags(self, adapter, guild, channels):
        vc = make_voice_client(channels[CHANNEL])
        guild.voice_client = vc

        ok = await adapter.ensure_connected(GUILD, OTHER_CHANNEL, self_mute=True)

        assert ok is True
        vc.move_to.assert_awaited_once_with(channels[OTHER_CHANNEL])
        guild.change_voice_state.assert_awaited_once_with(
            channel=channels[OTHER_CHANNEL], self_mute=True, self_deaf=True
        )

    async def test_stale_client_is_replaced(self, adapter, guild, channels):
        stale = make_voice_client(channels[CHANNEL], connected=False)
        guild.voice_client = stale

        async def drop(force):
            guild.voice_client = None

        stale.disconnect.side_effect = drop

        ok = await adapter.ensure_connected(GUILD, CHANNEL)

        assert ok is True
        stale.disconnect.assert_awaited_once_with(force=True)
        channels[CHANNEL].connect.assert_awaited_once()


class TestDisconnectAndMute:
    async def test_disconnect_without_client(self, adapter):
        assert await adapter.disconnect(GUILD) is True

    async def test_disconnect_failure(self, adapter, guild, channels):
        vc = make_voice_client(channels[CHANNEL])
        vc.disconnect.side_effect = RuntimeError("gateway gone")
        guild.voice_client = vc

        assert await adapter.disconnect(GUILD) is False

    async def test_set_self_mute(self, adapter, guild, channels):
        guild.voice_client = make_voice_client(channels[CHANNEL])

        assert await adapter.set_self_mute(GUILD, True) is True
        guild.change_voice_state.assert_awaited_once_with(
            channel=channels[CHANNEL], self_mute=True, self_deaf=True
        )

    async def test_set_self_mute_not_connected(self, adapter, guild):
        assert await adapter.set_self_mute(GUILD, True) is False
        guild.change_voice_state.assert_not_awaited()


class TestPlay:
    async def test_play_not_connected(self, adapter, stream):
        assert await adapter.play(GUILD, stream) is False

    async def test_play_builds_ffmpeg_source(self, adapter, guild, channels, stream):
        vc = make_voice_client(channels[CHANNEL], playing=True)
        guild.voice_client = vc

        with (
            patch(f"{VA_MODULE}.discord.FFmpegPCMAudio") as ffmpeg,
            patch(f"{VA_MODULE}.discord.PCMVolumeTransformer") as volume,
        ):
            ok = await adapter.play(GUILD, stream)

        assert ok is True
        vc.stop.assert_called_once()
        ffmpeg.assert_called_once_with(stream.location, before_options=None, options="-vn")
        volume.assert_called_once_with(ffmpeg.return_value, volume=0.5)
        assert vc.play.call_args.args == (volume.return_value,)

    async def test_play_client_error_is_not_reported_as_ended(
        self, adapter, guild, channels, stream
    ):
        vc = make_voice_client(channels[CHANNEL])
        vc.play.side_effect = discord.ClientException("already playing")
        guild.voice_client = vc
        callback = AsyncMock()
        adapter.set_on_playback_end_callback(callback)

        with (
            patch(f"{VA_MODULE}.discord.FFmpegPCMAudio"),
            patch(f"{VA_MODULE}.discord.PCMVolumeTransformer"),
        ):
            assert await adapter.play(GUILD, stream) is False

        await adapter._handle_stream_end(GUILD, stream)

        callback.assert_not_awaited()

    async def test_after_callback_reports_stream_end_once(
        self, adapter, bot, guild, channels, stream
    ):
        bot.loop = asyncio.get_running_loop()
        vc = make_voice_client(channels[CHANNEL])
        guild.voice_client = vc
        callback = AsyncMock()
        adapter.set_on_playback_end_callback(callback)

        with (
            patch(f"{VA_MODULE}.discord.FFmpegPCMAudio"),
            patch(f"{VA_MODULE}.discord.PCMVolumeTransformer"),
        ):
            await adapter.play(GUILD, stream)

        after = vc.play.call_args.kwargs["after"]
        await asyncio.to_thread(after, None)
        for _ in range(10):
            await asyncio.sleep(0)
        await adapter._handle_stream_end(GUILD, stream)

        callback.assert_awaited_once_with(GUILD, stream.source_ref)

    async def test_replaced_stream_end_is_ignored(self, adapter, guild, channels, stream):
        guild.voice_client = make_voice_client(channels[CHANNEL])
        newer = AudioStream(source_ref="https://example.com/x", location="https://cdn/x", title="x")
        callback = AsyncMock()
        adapter.set_on_playback_end_callback(callback)

        with (
            patch(f"{VA_MODULE}.discord.FFmpegPCMAudio"),
            patch(f"{VA_MODULE}.discord.PCMVolumeTransformer"),
        ):
            await adapter.play(GUILD, stream)
            await adapter.play(GUILD, newer)

        await adapter._handle_stream_end(GUILD, stream)
        callback.assert_not_awaited()

        await adapter._handle_stream_end(GUILD, newer)
        callback.assert_awaited_once_with(GUILD, newer.source_ref)

    async def test_disconnect_forgets_current_stream(self, adapter, guild, channels, stream):
        guild.voice_client = make_voice_client(channels[CHANNEL])
        callback = AsyncMock()
        adapter.set_on_playback_end_callback(callback)

        with (
            patch(f"{VA_MODULE}.discord.FFmpegPCMAudio"),
            patch(f"{VA_MODULE}.discord.PCMVolumeTransformer"),
        ):
            await adapter.play(GUILD, stream)

        await adapter.disconnect(GUILD)
        await adapter._handle_stream_end(GUILD, stream)

        callback.assert_not_awaited()

    async def test_callback_errors_are_contained(self, adapter, guild, channels, stream):
        guild.voice_client = make_voice_client(channels[CHANNEL])
        callback = AsyncMock(side_effect=RuntimeError("boom"))
        adapter.set_on_playback_end_callback(callback)

        with (
            patch(f"{VA_MODULE}.discord.FFmpegPCMAudio"),
            patch(f"{VA_MODULE}.discord.PCMVolumeTransformer"),
        ):
            await adapter.play(GUILD, stream)

        await adapter._handle_stream_end(GUILD, stream)

        callback.assert_awaited_once()
