"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_ringtone_bot.application.interfaces.audio_resolver import AudioResolver, AudioStream
from discord_ringtone_bot.application.interfaces.reply_sink import ReplySink
from discord_ringtone_bot.application.interfaces.ringtone_store import RingtoneStore
from discord_ringtone_bot.application.interfaces.voice_adapter import VoiceAdapter

__all__ = [
    "AudioResolver",
    "AudioStream",
    "ReplySink",
    "RingtoneStore",
    "VoiceAdapter",
]
