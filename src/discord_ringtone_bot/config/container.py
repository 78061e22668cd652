"""Dependency Injection Container

Owns the application's dependency graph: the session registry, presence
tracker, resolvers, Discord adapters and the services built on them.
Components are created on first access and cached for the process lifetime.
Everything that used to be process-global state hangs off one container
instance, so tests build their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.reply_sink import ReplySink
    from ..application.interfaces.ringtone_store import RingtoneStore
    from ..application.interfaces.voice_adapter import VoiceAdapter
    from ..application.services.command_dispatcher import CommandDispatcher
    from ..application.services.voice_session_service import VoiceSessionService
    from ..domain.voice.presence import MembershipSource, PresenceTracker
    from ..domain.voice.registry import SessionRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Discord-backed
    adapters need ``set_bot()`` to have been called first.
    """

    settings: Settings
    _bot: Bot | None = None

    # Domain state
    _registry: SessionRegistry | None = None
    _presence_tracker: PresenceTracker | None = None

    # Infrastructure adapters
    _membership_source: MembershipSource | None = None
    _audio_resolver: AudioResolver | None = None
    _voice_adapter: VoiceAdapter | None = None
    _ringtone_store: RingtoneStore | None = None
    _reply_sink: ReplySink | None = None

    # Application services
    _voice_session_service: VoiceSessionService | None = None
    _command_dispatcher: CommandDispatcher | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Domain State ===

    @property
    def registry(self) -> SessionRegistry:
        if self._registry is None:
            from ..domain.voice.registry import SessionRegistry

            self._registry = SessionRegistry()
        return self._registry

    @property
    def presence_tracker(self) -> PresenceTracker:
        if self._presence_tracker is None:
            from ..domain.voice.presence import PresenceTracker

            bot_user = self._bot.user if self._bot is not None else None
            self._presence_tracker = PresenceTracker(
                self.membership_source,
                bot_user_id=bot_user.id if bot_user is not None else None,
            )
        return self._presence_tracker

    # === Infrastructure Adapters ===

    @property
    def membership_source(self) -> MembershipSource:
        if self._membership_source is None:
            from ..infrastructure.discord.adapters.membership_source import (
                DiscordMembershipSource,
            )

            self._membership_source = DiscordMembershipSource(self.bot)
        return self._membership_source

    @property
    def audio_resolver(self) -> AudioResolver:
        """Get the routing audio resolver (greeting files and remote URLs)."""
        if self._audio_resolver is None:
            from ..infrastructure.audio.ringtone_resolver import RingtoneResolver
            from ..infrastructure.audio.source_resolver import AudioSourceResolver
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = AudioSourceResolver(
                greeting_resolver=RingtoneResolver(self.settings.ringtone),
                remote_resolver=YtDlpResolver(self.settings.audio),
                timeout_s=self.settings.audio.resolve_timeout_s,
            )
        return self._audio_resolver

    @property
    def voice_adapter(self) -> VoiceAdapter:
        if self._voice_adapter is None:
            from ..infrastructure.discord.adapters.voice_adapter import (
                DiscordVoiceAdapter,
            )

            self._voice_adapter = DiscordVoiceAdapter(
                self.bot, self.settings.audio, self.settings.voice
            )
        return self._voice_adapter

    @property
    def ringtone_store(self) -> RingtoneStore:
        if self._ringtone_store is None:
            from ..infrastructure.storage.ringtone_store import FileRingtoneStore

            self._ringtone_store = FileRingtoneStore(self.settings.ringtone)
        return self._ringtone_store

    @property
    def reply_sink(self) -> ReplySink:
        if self._reply_sink is None:
            from ..infrastructure.discord.adapters.reply_sink import DiscordReplySink

            self._reply_sink = DiscordReplySink(self.bot)
        return self._reply_sink

    # === Application Services ===

    @property
    def voice_session_service(self) -> VoiceSessionService:
        if self._voice_session_service is None:
            from ..application.services.voice_session_service import VoiceSessionService

            self._voice_session_service = VoiceSessionService(
                registry=self.registry,
                presence_tracker=self.presence_tracker,
                voice_adapter=self.voice_adapter,
                audio_resolver=self.audio_resolver,
            )
        return self._voice_session_service

    @property
    def command_dispatcher(self) -> CommandDispatcher:
        if self._command_dispatcher is None:
            from ..application.services.command_dispatcher import CommandDispatcher

            self._command_dispatcher = CommandDispatcher(
                voice_service=self.voice_session_service,
                ringtone_store=self.ringtone_store,
                replies=self.reply_sink,
                command_prefix=self.settings.discord.command_prefix,
            )
        return self._command_dispatcher

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Leave every voice channel and drop the registry's sessions."""
        if self._voice_session_service is not None:
            count = await self._voice_session_service.disconnect_all()
            logger.info("Disconnected %d voice session(s)", count)
        if self._registry is not None:
            self._registry.clear()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
