"""Command Dispatcher - maps text commands to session and ringtone operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import (
    JoinError,
    RegistryInvariantError,
    ResolveError,
    ResolveErrorKind,
    RingtoneStorageError,
    SessionStateError,
    UserInputError,
)
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.voice.events import CommandKind
from ...domain.voice.value_objects import MuteOutcome

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ...domain.voice.events import CommandMessage
    from ..interfaces.reply_sink import ReplySink
    from ..interfaces.ringtone_store import RingtoneStore
    from .voice_session_service import VoiceSessionService

logger = logging.getLogger(__name__)

_RESOLVE_REPLIES: dict[ResolveErrorKind, str] = {
    ResolveErrorKind.NOT_FOUND: DiscordUIMessages.ERROR_SOURCE_NOT_FOUND,
    ResolveErrorKind.NETWORK_FAILURE: DiscordUIMessages.ERROR_SOURCE_NETWORK,
    ResolveErrorKind.UNSUPPORTED_FORMAT: DiscordUIMessages.ERROR_SOURCE_UNSUPPORTED,
}

_MUTE_REPLIES: dict[MuteOutcome, str] = {
    MuteOutcome.MUTED: DiscordUIMessages.ACTION_MUTED,
    MuteOutcome.ALREADY_MUTED: DiscordUIMessages.ACTION_ALREADY_MUTED,
    MuteOutcome.UNMUTED: DiscordUIMessages.ACTION_UNMUTED,
    MuteOutcome.ALREADY_UNMUTED: DiscordUIMessages.ACTION_ALREADY_UNMUTED,
}


class CommandDispatcher:
    """Runs one command and produces exactly one reply for it.

    Context (guild vs. DM) and arguments are validated before any session
    state is touched. Expected failures become reply texts; unexpected ones
    are logged with a traceback and answered with a generic reply; a broken
    registry invariant is logged as critical.
    """

    def __init__(
        self,
        *,
        voice_service: VoiceSessionService,
        ringtone_store: RingtoneStore,
        replies: ReplySink,
        command_prefix: str = "~",
    ) -> None:
        self._voice = voice_service
        self._ringtones = ringtone_store
        self._replies = replies
        self._prefix = command_prefix

        self._handlers: dict[CommandKind, Callable[[CommandMessage], Awaitable[str]]] = {
            CommandKind.JOIN: self._join,
            CommandKind.LEAVE: self._leave,
            CommandKind.MUTE: self._mute,
            CommandKind.UNMUTE: self._unmute,
            CommandKind.PLAY: self._play,
            CommandKind.PING: self._ping,
            CommandKind.HELP: self._help,
            CommandKind.UPLOAD: self._upload,
            CommandKind.DELETE: self._delete,
        }

    async def handle(self, message: CommandMessage) -> str:
        """Dispatch *message* and send the reply to its channel."""
        reply = await self.dispatch(message)
        await self._replies.send(message.channel_id, reply)
        return reply

    async def dispatch(self, message: CommandMessage) -> str:
        """Run *message* and return the reply text."""
        command = message.command.value
        logger.debug(LogTemplates.COMMAND_RECEIVED, command, message.author_id, message.guild_id)

        try:
            return await self._handlers[message.command](message)
        except (UserInputError, SessionStateError) as exc:
            return exc.message
        except ResolveError as exc:
            logger.warning(LogTemplates.COMMAND_RESOLVE_FAILED, command, exc)
            return _RESOLVE_REPLIES[exc.kind]
        except JoinError as exc:
            logger.error(LogTemplates.COMMAND_JOIN_FAILED, command, exc)
            return DiscordUIMessages.ERROR_JOINING
        except RingtoneStorageError as exc:
            logger.warning(LogTemplates.COMMAND_STORAGE_FAILED, command, exc)
            return exc.message
        except RegistryInvariantError as exc:
            logger.critical(LogTemplates.REGISTRY_INVARIANT_BROKEN, exc)
            return DiscordUIMessages.ERROR_COMMAND_FAILED_SEE_LOGS
        except Exception:
            logger.exception(LogTemplates.COMMAND_FAILED, command)
            return DiscordUIMessages.ERROR_COMMAND_FAILED_SEE_LOGS

    # ─────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _require_guild(message: CommandMessage) -> int:
        if message.guild_id is None:
            raise UserInputError(DiscordUIMessages.STATE_DMS_NOT_SUPPORTED)
        return message.guild_id

    # ─────────────────────────────────────────────────────────────────
    # Handlers
    # ─────────────────────────────────────────────────────────────────

    async def _join(self, message: CommandMessage) -> str:
        guild_id = self._require_guild(message)
        channel_id = message.author_voice_channel_id
        if channel_id is None:
            raise UserInputError(DiscordUIMessages.STATE_USER_NOT_IN_VOICE)

        session = await self._voice.join(guild_id, channel_id)
        return DiscordUIMessages.ACTION_JOINED.format(channel_id=session.channel_id)

    async def _leave(self, message: CommandMessage) -> str:
        guild_id = self._require_guild(message)
        if not await self._voice.leave(guild_id):
            return DiscordUIMessages.STATE_NOT_IN_VOICE
        return DiscordUIMessages.ACTION_LEFT

    async def _mute(self, message: CommandMessage) -> str:
        outcome = await self._voice.mute(self._require_guild(message))
        return _MUTE_REPLIES[outcome]

    async def _unmute(self, message: CommandMessage) -> str:
        outcome = await self._voice.unmute(self._require_guild(message))
        return _MUTE_REPLIES[outcome]

    async def _play(self, message: CommandMessage) -> str:
        guild_id = self._require_guild(message)
        if not message.args:
            raise UserInputError(DiscordUIMessages.ERROR_URL_REQUIRED, field="url")

        await self._voice.play(guild_id, message.args[0])
        return DiscordUIMessages.ACTION_PLAYING

    async def _ping(self, message: CommandMessage) -> str:
        return DiscordUIMessages.ACTION_PONG

    async def _help(self, message: CommandMessage) -> str:
        return DiscordUIMessages.HELP_TEXT.format(
            prefix=self._prefix, extension=self._ringtones.extension
        )

    async def _upload(self, message: CommandMessage) -> str:
        self._require_guild(message)
        if not message.attachments:
            raise UserInputError(
                DiscordUIMessages.RINGTONE_NO_ATTACHMENT.format(extension=self._ringtones.extension)
            )

        attachment = message.attachments[0]
        path = await self._ringtones.save(
            message.guild_name, message.author_name, attachment.filename, attachment.data
        )
        return DiscordUIMessages.RINGTONE_SAVED.format(path=path)

    async def _delete(self, message: CommandMessage) -> str:
        self._require_guild(message)
        path = await self._ringtones.delete(message.guild_name, message.author_name)
        return DiscordUIMessages.RINGTONE_DELETED.format(path=path)
