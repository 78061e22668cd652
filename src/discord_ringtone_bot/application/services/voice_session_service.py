"""Per-guild voice session state machine.

Presence events and commands for one guild are applied in arrival order:
each transition runs inside that guild's "turn" (an ``asyncio.Lock``), so a
move and a concurrent ``leave`` never interleave half-way. Guilds do not
wait on each other. Inside a turn, registry critical sections stay short
and synchronous; connection I/O happens between them. Resolving audio is
done outside the turn, and the result is applied only if the guild is
still connected when the turn is re-acquired.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import (
    JoinError,
    ResolveError,
    SessionStateError,
    UserInputError,
)
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.validators import is_remote_source
from ...domain.voice.value_objects import (
    GreetingRef,
    MuteOutcome,
    RemoteSourceRef,
    VoiceTransition,
)

if TYPE_CHECKING:
    from ...domain.voice.entities import VoiceSession
    from ...domain.voice.events import VoiceStateEvent
    from ...domain.voice.presence import PresenceTracker
    from ...domain.voice.registry import SessionRegistry
    from ..interfaces.audio_resolver import AudioResolver, AudioStream
    from ..interfaces.voice_adapter import VoiceAdapter

logger = logging.getLogger(__name__)


class VoiceSessionService:
    def __init__(
        self,
        *,
        registry: SessionRegistry,
        presence_tracker: PresenceTracker,
        voice_adapter: VoiceAdapter,
        audio_resolver: AudioResolver,
    ) -> None:
        self._registry = registry
        self._presence = presence_tracker
        self._voice = voice_adapter
        self._resolver = audio_resolver
        self._guild_turns: dict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

        self._voice.set_on_playback_end_callback(self.playback_finished)

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    # ─────────────────────────────────────────────────────────────────
    # Presence-driven transitions
    # ─────────────────────────────────────────────────────────────────

    async def handle_voice_state(self, event: VoiceStateEvent) -> VoiceTransition:
        if self._presence.is_bot_user(event.user_id):
            return VoiceTransition.NONE

        if (event.entered or event.moved) and not event.user_is_bot:
            assert event.new_channel_id is not None
            try:
                async with self._guild_turns[event.guild_id]:
                    await self._connect(event.guild_id, event.new_channel_id)
            except JoinError as exc:
                logger.error(LogTemplates.SESSION_JOIN_FAILED, exc.channel_id, exc.guild_id)
                return VoiceTransition.NONE

            await self._greet(event)
            return VoiceTransition.JOINED if event.entered else VoiceTransition.MOVED

        if event.left:
            # Any account leaving re-checks occupancy, bots included.
            assert event.old_channel_id is not None
            return await self._leave_if_empty(event.guild_id, event.old_channel_id)

        return VoiceTransition.NONE

    async def _greet(self, event: VoiceStateEvent) -> VoiceSession | None:
        ref = GreetingRef(guild_name=event.guild_name, user_name=event.user_name)
        try:
            stream = await self._resolver.resolve(ref)
            return await self._start_playback(event.guild_id, stream)
        except ResolveError as exc:
            logger.info(LogTemplates.GREETING_FAILED, event.user_name, event.guild_id, exc)
            return None

    async def _leave_if_empty(self, guild_id: int, channel_id: int) -> VoiceTransition:
        async with self._guild_turns[guild_id]:
            session = self._registry.get(guild_id)
            if session is None or session.channel_id != channel_id:
                return VoiceTransition.NONE

            if self._presence.count_humans(guild_id, channel_id) > 0:
                return VoiceTransition.NONE

            logger.info(LogTemplates.SESSION_AUTO_LEAVE, channel_id, guild_id)
            await self._disconnect(guild_id)
            return VoiceTransition.LEFT

    # ─────────────────────────────────────────────────────────────────
    # Command-driven transitions
    # ─────────────────────────────────────────────────────────────────

    async def join(self, guild_id: int, channel_id: int) -> VoiceSession:
        """Connect to *channel_id* without a greeting."""
        async with self._guild_turns[guild_id]:
            return await self._connect(guild_id, channel_id)

    async def leave(self, guild_id: int) -> bool:
        async with self._guild_turns[guild_id]:
            return await self._disconnect(guild_id)

    async def mute(self, guild_id: int) -> MuteOutcome:
        return await self._set_muted(guild_id, True)

    async def unmute(self, guild_id: int) -> MuteOutcome:
        return await self._set_muted(guild_id, False)

    async def play(self, guild_id: int, url: str) -> VoiceSession:
        """Replace the guild's playback with the audio at *url*."""
        if not is_remote_source(url):
            raise UserInputError(DiscordUIMessages.ERROR_URL_INVALID, field="url")

        if guild_id not in self._registry:
            raise SessionStateError(guild_id, DiscordUIMessages.STATE_NOT_IN_VOICE_TO_PLAY)

        stream = await self._resolver.resolve(RemoteSourceRef(url=url))
        session = await self._start_playback(guild_id, stream)
        if session is None:
            raise SessionStateError(guild_id, DiscordUIMessages.STATE_NOT_IN_VOICE_TO_PLAY)
        return session

    async def playback_finished(self, guild_id: int, source_ref: str) -> None:
        async with self._guild_turns[guild_id]:
            if guild_id not in self._registry:
                return
            with self._registry.mutate(guild_id) as session:
                finished = session.finish_playback(source_ref)
            if finished:
                logger.debug(LogTemplates.SESSION_PLAYBACK_IDLE, guild_id)

    async def disconnect_all(self) -> int:
        count = 0
        for guild_id in self._registry.guild_ids():
            if await self.leave(guild_id):
                count += 1
        return count

    # ─────────────────────────────────────────────────────────────────
    # Steps (callers hold the guild's turn unless noted)
    # ─────────────────────────────────────────────────────────────────

    async def _connect(self, guild_id: int, channel_id: int) -> VoiceSession:
        current = self._registry.get(guild_id)
        muted = current.muted if current is not None else False

        if not await self._voice.ensure_connected(guild_id, channel_id, self_mute=muted):
            raise JoinError(guild_id, channel_id)

        return self._registry.join(guild_id, channel_id)

    async def _disconnect(self, guild_id: int) -> bool:
        if not self._registry.leave(guild_id):
            return False
        await self._voice.disconnect(guild_id)
        return True

    async def _set_muted(self, guild_id: int, muted: bool) -> MuteOutcome:
        async with self._guild_turns[guild_id]:
            if guild_id not in self._registry:
                message = (
                    DiscordUIMessages.STATE_NOT_IN_VOICE
                    if muted
                    else DiscordUIMessages.STATE_NOT_IN_VOICE_TO_UNMUTE
                )
                raise SessionStateError(guild_id, message)

            with self._registry.mutate(guild_id) as session:
                changed = session.set_muted(muted)

            if not changed:
                return MuteOutcome.ALREADY_MUTED if muted else MuteOutcome.ALREADY_UNMUTED

            logger.info(LogTemplates.SESSION_MUTE_CHANGED, guild_id, muted)
            await self._voice.set_self_mute(guild_id, muted)
            return MuteOutcome.MUTED if muted else MuteOutcome.UNMUTED

    async def _start_playback(self, guild_id: int, stream: AudioStream) -> VoiceSession | None:
        """Acquires the guild's turn itself; returns None if the guild was left meanwhile."""
        async with self._guild_turns[guild_id]:
            if guild_id not in self._registry:
                logger.info(LogTemplates.PLAYBACK_DISCARDED, stream.source_ref, guild_id)
                return None

            if not await self._voice.play(guild_id, stream):
                raise ResolveError.network_failure(stream.source_ref, "playback could not start")

            with self._registry.mutate(guild_id) as session:
                session.start_playback(stream.source_ref)
                snapshot = session.model_copy()

            logger.info(LogTemplates.SESSION_PLAYBACK_SET, guild_id, stream.source_ref)
            return snapshot
