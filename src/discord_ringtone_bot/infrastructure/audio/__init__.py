"""Audio infrastructure - greeting file, yt-dlp and routing resolvers."""

from discord_ringtone_bot.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from discord_ringtone_bot.infrastructure.audio.ringtone_resolver import RingtoneResolver
from discord_ringtone_bot.infrastructure.audio.source_resolver import AudioSourceResolver
from discord_ringtone_bot.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "AudioSourceResolver",
    "CacheEntry",
    "RingtoneResolver",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
