"""
Unit Tests for the Session Registry

Tests for:
- join creating and moving sessions
- leave idempotence
- snapshot isolation of get()
- mutate() raising RegistryInvariantError for missing guilds
- at most one session per guild under concurrent access
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import CHANNEL_A, CHANNEL_B, GUILD_ID, OTHER_GUILD_ID
from discord_ringtone_bot.domain.shared.exceptions import RegistryInvariantError
from discord_ringtone_bot.domain.voice.registry import SessionRegistry


class TestJoin:
    def test_join_creates_session(self, registry):
        """Should create a connected, unmuted, idle session."""
        session = registry.join(GUILD_ID, CHANNEL_A)

        assert session.guild_id == GUILD_ID
        assert session.channel_id == CHANNEL_A
        assert session.muted is False
        assert session.is_playing is False
        assert GUILD_ID in registry
        assert len(registry) == 1

    def test_join_existing_moves_and_keeps_mute(self, registry):
        """Should update the channel of an existing session without resetting it."""
        registry.join(GUILD_ID, CHANNEL_A)
        with registry.mutate(GUILD_ID) as live:
            live.set_muted(True)
            live.start_playback("greeting:g/u")

        session = registry.join(GUILD_ID, CHANNEL_B)

        assert session.channel_id == CHANNEL_B
        assert session.muted is True
        assert session.playback.source_ref == "greeting:g/u"
        assert len(registry) == 1

    def test_join_same_channel_is_stable(self, registry):
        """Joining the current channel again should change nothing."""
        first = registry.join(GUILD_ID, CHANNEL_A)
        second = registry.join(GUILD_ID, CHANNEL_A)

        assert first.connected_at == second.connected_at
        assert len(registry) == 1


class TestLeave:
    def test_leave_removes_session(self, registry):
        registry.join(GUILD_ID, CHANNEL_A)

        assert registry.leave(GUILD_ID) is True
        assert registry.get(GUILD_ID) is None
        assert len(registry) == 0

    def test_leave_without_session_is_noop(self, registry):
        """Should return False and leave other guilds untouched."""
        registry.join(OTHER_GUILD_ID, CHANNEL_A)

        assert registry.leave(GUILD_ID) is False
        assert registry.leave(GUILD_ID) is False
        assert OTHER_GUILD_ID in registry


class TestSnapshots:
    def test_get_returns_copy(self, registry):
        """Mutating a snapshot must not affect the registry."""
        registry.join(GUILD_ID, CHANNEL_A)

        snapshot = registry.get(GUILD_ID)
        snapshot.set_muted(True)

        assert registry.get(GUILD_ID).muted is False

    def test_mutate_changes_live_session(self, registry):
        registry.join(GUILD_ID, CHANNEL_A)

        with registry.mutate(GUILD_ID) as session:
            session.set_muted(True)

        assert registry.get(GUILD_ID).muted is True

    def test_mutate_missing_session_raises(self, registry):
        with pytest.raises(RegistryInvariantError) as exc_info:
            with registry.mutate(GUILD_ID):
                pass

        assert exc_info.value.guild_id == GUILD_ID

    def test_contains_rejects_non_int(self, registry):
        assert "not-a-guild" not in registry

    def test_guild_ids_and_clear(self, registry):
        registry.join(GUILD_ID, CHANNEL_A)
        registry.join(OTHER_GUILD_ID, CHANNEL_B)

        assert sorted(registry.guild_ids()) == sorted([GUILD_ID, OTHER_GUILD_ID])

        registry.clear()

        assert len(registry) == 0


class TestConcurrency:
    def test_concurrent_joins_leave_one_session_per_guild(self):
        """Many threads joining the same guilds must never create duplicates."""
        registry = SessionRegistry()
        guilds = [GUILD_ID + i for i in range(5)]
        start = threading.Barrier(20)

        def worker(n: int) -> None:
            start.wait()
            for _ in range(200):
                guild = guilds[n % len(guilds)]
                registry.join(guild, CHANNEL_A if n % 2 else CHANNEL_B)

        with ThreadPoolExecutor(max_workers=20) as pool:
            list(pool.map(worker, range(20)))

        assert len(registry) == len(guilds)
        assert sorted(registry.guild_ids()) == sorted(guilds)

    def test_concurrent_join_and_leave_never_tear(self):
        """Interleaved join/leave leaves the guild either absent or whole."""
        registry = SessionRegistry()
        start = threading.Barrier(8)

        def joiner() -> None:
            start.wait()
            for _ in range(500):
                registry.join(GUILD_ID, CHANNEL_A)

        def leaver() -> None:
            start.wait()
            for _ in range(500):
                registry.leave(GUILD_ID)
                session = registry.get(GUILD_ID)
                assert session is None or session.channel_id == CHANNEL_A

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(joiner) for _ in range(4)]
            futures += [pool.submit(leaver) for _ in range(4)]
            for future in futures:
                future.result()

        assert len(registry) in (0, 1)

    def test_listing_while_other_guilds_join_and_leave(self):
        """guild_ids() and len() stay consistent while the map changes."""
        registry = SessionRegistry()
        guilds = [GUILD_ID + i for i in range(50)]
        start = threading.Barrier(4)

        def churn(offset: int) -> None:
            start.wait()
            for _ in range(100):
                for guild in guilds[offset::2]:
                    registry.join(guild, CHANNEL_A)
                for guild in guilds[offset::2]:
                    registry.leave(guild)

        def reader() -> None:
            start.wait()
            for _ in range(2000):
                ids = registry.guild_ids()
                assert len(set(ids)) == len(ids)
                assert set(ids) <= set(guilds)
                assert 0 <= len(registry) <= len(guilds)

        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [pool.submit(churn, 0), pool.submit(churn, 1)]
            futures += [pool.submit(reader) for _ in range(2)]
            for future in futures:
                future.result()

        assert len(registry) == 0
