"""AudioResolver implementation using yt-dlp for remote URLs."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Final, cast

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from discord_ringtone_bot.application.interfaces.audio_resolver import AudioResolver, AudioStream
from discord_ringtone_bot.config.settings import AudioSettings
from discord_ringtone_bot.domain.shared.exceptions import ResolveError, ResolveErrorKind
from discord_ringtone_bot.domain.shared.messages import LogTemplates
from discord_ringtone_bot.domain.voice.value_objects import AudioIdentifier, RemoteSourceRef
from discord_ringtone_bot.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

# Substrings of yt-dlp error messages, lowercased.
UNSUPPORTED_MARKERS: Final[tuple[str, ...]] = ("unsupported url",)
NOT_FOUND_MARKERS: Final[tuple[str, ...]] = (
    "video unavailable",
    "is not available",
    "private video",
    "has been removed",
    "does not exist",
    "http error 404",
    "http error 410",
)


def classify_download_error(message: str) -> ResolveErrorKind:
    """Map a yt-dlp error message to the resolver failure it represents."""
    lowered = message.lower()
    if any(marker in lowered for marker in UNSUPPORTED_MARKERS):
        return ResolveErrorKind.UNSUPPORTED_FORMAT
    if any(marker in lowered for marker in NOT_FOUND_MARKERS):
        return ResolveErrorKind.NOT_FOUND
    return ResolveErrorKind.NETWORK_FAILURE


class YtDlpResolver(AudioResolver):
    """Resolves ``RemoteSourceRef`` URLs to direct media streams.

    Extraction runs in a worker thread. Successful extractions are cached
    per URL for ``CACHE_TTL`` seconds; failures are never cached.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format or "bestaudio/best")
        self._cache: dict[str, CacheEntry] = {}

    def _cached(self, url: str, now: float) -> YtDlpTrackInfo | None:
        cached = self._cache.get(url)
        if cached is None:
            return None
        if now - cached.cached_at < CACHE_TTL:
            logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
            return cached.info
        self._cache.pop(url, None)
        return None

    def _store(self, url: str, info: YtDlpTrackInfo, now: float) -> None:
        self._cache[url] = CacheEntry(info=info, cached_at=now)

        if len(self._cache) > CACHE_MAX_SIZE:
            expired = [k for k, entry in self._cache.items() if now - entry.cached_at >= CACHE_TTL]
            for k in expired:
                self._cache.pop(k, None)
            if expired:
                logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo:
        now = time.time()
        cached = self._cached(url, now)
        if cached is not None:
            return cached

        try:
            with YoutubeDL(params=cast(Any, self._base_opts.model_dump(exclude_none=True))) as ydl:
                data = ydl.extract_info(url, download=False)
        except DownloadError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url[:LOG_URL_TRUNCATE])
            kind = classify_download_error(str(exc))
            if kind is ResolveErrorKind.NETWORK_FAILURE:
                raise ResolveError.network_failure(url, str(exc)) from exc
            raise ResolveError(kind, url, str(exc)) from exc

        if not isinstance(data, dict):
            raise ResolveError.unsupported_format(url)

        info = YtDlpTrackInfo.model_validate(dict(data))
        self._store(url, info, now)
        return info

    async def resolve(self, identifier: AudioIdentifier) -> AudioStream:
        if not isinstance(identifier, RemoteSourceRef):
            raise ResolveError.unsupported_format(str(identifier))

        url = identifier.url
        info = await asyncio.to_thread(self._extract_info_sync, url)

        stream_url = info.stream_url
        if not stream_url:
            raise ResolveError.unsupported_format(url)

        ffmpeg = self._settings.ffmpeg_options
        return AudioStream(
            source_ref=url,
            location=stream_url,
            title=info.title,
            before_options=ffmpeg.get("before_options", ""),
            options=ffmpeg.get("options", "-vn"),
        )

    def clear_cache(self) -> None:
        self._cache.clear()
