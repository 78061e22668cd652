"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, voice/membership/reply adapters)
- Audio (greeting files, yt-dlp, routing with timeout)
- Storage (greeting uploads on the local file system)
"""

from discord_ringtone_bot.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
from discord_ringtone_bot.infrastructure.discord.bot import create_bot
from discord_ringtone_bot.infrastructure.storage.ringtone_store import FileRingtoneStore

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
    "FileRingtoneStore",
]
