"""
Unit Tests for Presence Tracking

Tests for:
- human_occupants excluding the bot itself and other bots
- PresenceTracker taking a fresh snapshot on every count
"""

from conftest import BOT_USER_ID, CHANNEL_A, GUILD_ID, OTHER_USER_ID, USER_ID
from discord_ringtone_bot.domain.voice.presence import (
    ChannelMember,
    PresenceTracker,
    human_occupants,
)


class TestHumanOccupants:
    def test_empty_snapshot(self):
        assert human_occupants([]) == 0

    def test_counts_humans_only(self):
        """Should skip the bot's own account and any bot-flagged member."""
        snapshot = [
            ChannelMember(user_id=USER_ID),
            ChannelMember(user_id=OTHER_USER_ID),
            ChannelMember(user_id=BOT_USER_ID, is_bot=True),
            ChannelMember(user_id=123, is_bot=True),
        ]

        assert human_occupants(snapshot, BOT_USER_ID) == 2

    def test_excludes_bot_user_even_if_not_flagged(self):
        snapshot = [ChannelMember(user_id=BOT_USER_ID)]

        assert human_occupants(snapshot, BOT_USER_ID) == 0
        assert human_occupants(snapshot) == 1


class TestPresenceTracker:
    def test_count_uses_fresh_snapshot_each_time(self, membership, presence):
        """Counts must follow the membership source, never a cached value."""
        membership.put(GUILD_ID, CHANNEL_A, ChannelMember(user_id=USER_ID))
        assert presence.count_humans(GUILD_ID, CHANNEL_A) == 1

        membership.put(GUILD_ID, CHANNEL_A)
        assert presence.count_humans(GUILD_ID, CHANNEL_A) == 0

        assert membership.calls == [(GUILD_ID, CHANNEL_A), (GUILD_ID, CHANNEL_A)]

    def test_unknown_channel_counts_zero(self, presence):
        assert presence.count_humans(GUILD_ID, CHANNEL_A) == 0

    def test_bot_user_id_can_be_set_late(self, membership):
        tracker = PresenceTracker(membership)
        membership.put(GUILD_ID, CHANNEL_A, ChannelMember(user_id=BOT_USER_ID))

        assert tracker.is_bot_user(BOT_USER_ID) is False
        assert tracker.count_humans(GUILD_ID, CHANNEL_A) == 1

        tracker.set_bot_user_id(BOT_USER_ID)

        assert tracker.bot_user_id == BOT_USER_ID
        assert tracker.is_bot_user(BOT_USER_ID) is True
        assert tracker.count_humans(GUILD_ID, CHANNEL_A) == 0
