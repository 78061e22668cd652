import asyncio

import pytest

from discord_ringtone_bot.application.interfaces.audio_resolver import AudioResolver, AudioStream
from discord_ringtone_bot.application.interfaces.reply_sink import ReplySink
from discord_ringtone_bot.application.interfaces.voice_adapter import VoiceAdapter
from discord_ringtone_bot.domain.shared.exceptions import ResolveError
from discord_ringtone_bot.domain.voice.presence import (
    ChannelMember,
    MembershipSource,
    PresenceTracker,
)
from discord_ringtone_bot.domain.voice.registry import SessionRegistry
from discord_ringtone_bot.domain.voice.value_objects import GreetingRef, RemoteSourceRef

GUILD_ID = 111111111111111111
OTHER_GUILD_ID = 222222222222222222
CHANNEL_A = 333333333333333333
CHANNEL_B = 444444444444444444
USER_ID = 555555555555555555
OTHER_USER_ID = 666666666666666666
BOT_USER_ID = 999999999999999999


# ============================================================================
# In-memory port implementations
# ============================================================================


class FakeMembershipSource(MembershipSource):
    """Channel membership held in a dict; tests move members around directly."""

    def __init__(self) -> None:
        self.members: dict[tuple[int, int], list[ChannelMember]] = {}
        self.calls: list[tuple[int, int]] = []

    def put(self, guild_id: int, channel_id: int, *members: ChannelMember) -> None:
        self.members[(guild_id, channel_id)] = list(members)

    def channel_members(self, guild_id: int, channel_id: int) -> list[ChannelMember]:
        self.calls.append((guild_id, channel_id))
        return list(self.members.get((guild_id, channel_id), []))


class FakeVoiceAdapter(VoiceAdapter):
    """Records transport calls; ``fail_connect`` / ``fail_play`` force failures."""

    def __init__(self) -> None:
        self.channels: dict[int, int] = {}
        self.self_mute: dict[int, bool] = {}
        self.playing: dict[int, AudioStream] = {}
        self.calls: list[tuple] = []
        self.fail_connect = False
        self.fail_play = False
        self.connect_delay = 0.0
        self.callback = None

    async def connect(self, guild_id, channel_id):
        return await self.ensure_connected(guild_id, channel_id)

    async def disconnect(self, guild_id):
        self.calls.append(("disconnect", guild_id))
        self.channels.pop(guild_id, None)
        self.playing.pop(guild_id, None)
        return True

    async def ensure_connected(self, guild_id, channel_id, *, self_mute=False):
        self.calls.append(("ensure_connected", guild_id, channel_id, self_mute))
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.fail_connect:
            return False
        self.channels[guild_id] = channel_id
        self.self_mute[guild_id] = self_mute
        return True

    async def move_to(self, guild_id, channel_id):
        return await self.ensure_connected(guild_id, channel_id)

    async def set_self_mute(self, guild_id, muted):
        self.calls.append(("set_self_mute", guild_id, muted))
        self.self_mute[guild_id] = muted
        return True

    async def play(self, guild_id, stream):
        self.calls.append(("play", guild_id, stream.source_ref))
        if self.fail_play or guild_id not in self.channels:
            return False
        self.playing[guild_id] = stream
        return True

    def set_on_playback_end_callback(self, callback):
        self.callback = callback


class FakeResolver(AudioResolver):
    """Resolves from a dict keyed by ``str(identifier)``; unknown keys are NOT_FOUND."""

    def __init__(self) -> None:
        self.streams: dict[str, AudioStream] = {}
        self.errors: dict[str, ResolveError] = {}
        self.calls: list[object] = []
        self.gate: asyncio.Event | None = None

    def add(self, identifier: GreetingRef | RemoteSourceRef, title: str = "clip") -> AudioStream:
        key = str(identifier)
        stream = AudioStream(source_ref=key, location=f"/media/{title}", title=title)
        self.streams[key] = stream
        return stream

    async def resolve(self, identifier):
        self.calls.append(identifier)
        if self.gate is not None:
            await self.gate.wait()
        key = str(identifier)
        if key in self.errors:
            raise self.errors[key]
        if key not in self.streams:
            raise ResolveError.not_found(key)
        return self.streams[key]


class RecordingReplySink(ReplySink):
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    async def send(self, channel_id, text):
        self.sent.append((channel_id, text))
        return True


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def membership():
    return FakeMembershipSource()


@pytest.fixture
def presence(membership):
    return PresenceTracker(membership, bot_user_id=BOT_USER_ID)


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def voice_adapter():
    return FakeVoiceAdapter()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def replies():
    return RecordingReplySink()


@pytest.fixture
def voice_service(registry, presence, voice_adapter, resolver):
    from discord_ringtone_bot.application.services.voice_session_service import (
        VoiceSessionService,
    )

    return VoiceSessionService(
        registry=registry,
        presence_tracker=presence,
        voice_adapter=voice_adapter,
        audio_resolver=resolver,
    )


@pytest.fixture
def human():
    return ChannelMember(user_id=USER_ID, is_bot=False)


@pytest.fixture
def bot_member():
    return ChannelMember(user_id=BOT_USER_ID, is_bot=True)
