# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages and exceptions
- voice/: Voice sessions, presence tracking and the session registry
"""

from discord_ringtone_bot.domain.shared.exceptions import DomainError
from discord_ringtone_bot.domain.voice.entities import VoiceSession
from discord_ringtone_bot.domain.voice.registry import SessionRegistry

__all__ = [
    "DomainError",
    "SessionRegistry",
    "VoiceSession",
]
