"""In-memory registry of active voice sessions, one per guild.

Two kinds of lock guard the registry. The map lock covers every lookup,
insert, removal and iteration of the guild map, so the map is never read
mid-mutation. A per-guild lock is held for a whole operation on one guild
(create or move, leave, ``mutate``), so operations on the same guild are
serialized while other guilds only ever wait for the brief map lookups.
Lock order is always guild lock, then map lock.

Critical sections never await or perform I/O. The locks are ``threading``
locks so the registry stays safe to use from any thread, not only from the
event loop.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from discord_ringtone_bot.domain.shared.exceptions import RegistryInvariantError
from discord_ringtone_bot.domain.shared.messages import LogTemplates
from discord_ringtone_bot.domain.voice.entities import VoiceSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[int, VoiceSession] = {}
        self._guild_locks: dict[int, threading.Lock] = {}
        self._map_lock = threading.Lock()

    def _lock_for(self, guild_id: int) -> threading.Lock:
        with self._map_lock:
            lock = self._guild_locks.get(guild_id)
            if lock is None:
                lock = threading.Lock()
                self._guild_locks[guild_id] = lock
            return lock

    def _lookup(self, guild_id: int) -> VoiceSession | None:
        with self._map_lock:
            return self._sessions.get(guild_id)

    def join(self, guild_id: int, channel_id: int) -> VoiceSession:
        """Create the guild's session, or move the existing one to *channel_id*.

        Returns a snapshot of the session after the change.
        """
        with self._lock_for(guild_id):
            session = self._lookup(guild_id)
            if session is None:
                session = VoiceSession(guild_id=guild_id, channel_id=channel_id)
                with self._map_lock:
                    self._sessions[guild_id] = session
                logger.info(LogTemplates.SESSION_JOINED, guild_id, channel_id)
            else:
                previous = session.move_to(channel_id)
                if previous != channel_id:
                    logger.info(LogTemplates.SESSION_MOVED, guild_id, previous, channel_id)
            return session.model_copy()

    def leave(self, guild_id: int) -> bool:
        """Remove the guild's session; False if there was none."""
        with self._lock_for(guild_id):
            with self._map_lock:
                removed = self._sessions.pop(guild_id, None)
        if removed is not None:
            logger.info(LogTemplates.SESSION_LEFT, guild_id)
        return removed is not None

    def get(self, guild_id: int) -> VoiceSession | None:
        """Snapshot of the guild's session, or None when not connected."""
        with self._lock_for(guild_id):
            session = self._lookup(guild_id)
            return session.model_copy() if session is not None else None

    @contextmanager
    def mutate(self, guild_id: int) -> Iterator[VoiceSession]:
        """Yield the live session while holding the guild's lock.

        The body must not await or block. Check membership first when a
        missing session is a normal condition; here it is an invariant
        violation.
        """
        with self._lock_for(guild_id):
            session = self._lookup(guild_id)
            if session is None:
                raise RegistryInvariantError(guild_id)
            yield session

    def guild_ids(self) -> list[int]:
        with self._map_lock:
            return list(self._sessions)

    def clear(self) -> None:
        for guild_id in self.guild_ids():
            self.leave(guild_id)

    def __contains__(self, guild_id: object) -> bool:
        if not isinstance(guild_id, int):
            return False
        return self._lookup(guild_id) is not None

    def __len__(self) -> int:
        with self._map_lock:
            return len(self._sessions)
