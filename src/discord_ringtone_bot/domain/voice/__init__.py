"""
Voice Bounded Context

Domain logic for per-guild voice sessions, presence and inbound events.
"""

from discord_ringtone_bot.domain.voice.entities import VoiceSession
from discord_ringtone_bot.domain.voice.events import (
    CommandKind,
    CommandMessage,
    UploadedFile,
    VoiceStateEvent,
)
from discord_ringtone_bot.domain.voice.presence import (
    ChannelMember,
    MembershipSource,
    PresenceTracker,
    human_occupants,
)
from discord_ringtone_bot.domain.voice.registry import SessionRegistry
from discord_ringtone_bot.domain.voice.value_objects import (
    AudioIdentifier,
    GreetingRef,
    MuteOutcome,
    Playback,
    RemoteSourceRef,
    VoiceTransition,
)

__all__ = [
    # Entities
    "VoiceSession",
    # Value Objects
    "Playback",
    "GreetingRef",
    "RemoteSourceRef",
    "AudioIdentifier",
    "VoiceTransition",
    "MuteOutcome",
    # Events
    "VoiceStateEvent",
    "CommandMessage",
    "CommandKind",
    "UploadedFile",
    # Presence
    "ChannelMember",
    "MembershipSource",
    "PresenceTracker",
    "human_occupants",
    # Registry
    "SessionRegistry",
]
