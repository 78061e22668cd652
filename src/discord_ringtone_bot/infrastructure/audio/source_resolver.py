"""Routes audio identifiers to the resolver for their kind, with a timeout."""

from __future__ import annotations

import asyncio
import logging

from discord_ringtone_bot.application.interfaces.audio_resolver import AudioResolver, AudioStream
from discord_ringtone_bot.domain.shared.exceptions import ResolveError, ResolveErrorKind
from discord_ringtone_bot.domain.shared.messages import ErrorMessages, LogTemplates
from discord_ringtone_bot.domain.voice.value_objects import (
    AudioIdentifier,
    GreetingRef,
    RemoteSourceRef,
)

logger = logging.getLogger(__name__)


class AudioSourceResolver(AudioResolver):
    def __init__(
        self,
        *,
        greeting_resolver: AudioResolver,
        remote_resolver: AudioResolver,
        timeout_s: float,
    ) -> None:
        self._greetings = greeting_resolver
        self._remote = remote_resolver
        self._timeout_s = timeout_s

    def _route(self, identifier: AudioIdentifier) -> AudioResolver:
        if isinstance(identifier, GreetingRef):
            return self._greetings
        if isinstance(identifier, RemoteSourceRef):
            return self._remote
        raise ResolveError(
            ResolveErrorKind.UNSUPPORTED_FORMAT,
            str(identifier),
            ErrorMessages.UNSUPPORTED_IDENTIFIER.format(kind=type(identifier).__name__),
        )

    async def resolve(self, identifier: AudioIdentifier) -> AudioStream:
        resolver = self._route(identifier)
        try:
            async with asyncio.timeout(self._timeout_s):
                return await resolver.resolve(identifier)
        except TimeoutError as exc:
            logger.warning(LogTemplates.RESOLVE_TIMEOUT, identifier, self._timeout_s)
            raise ResolveError.network_failure(
                str(identifier), ErrorMessages.RESOLVE_TIMEOUT.format(timeout=self._timeout_s)
            ) from exc
        except ResolveError as exc:
            logger.debug(LogTemplates.RESOLVE_FAILED, identifier, exc)
            raise
