"""Pydantic models for yt-dlp data transformation and configuration.

These are infrastructure-specific models for parsing external yt-dlp data,
caching extraction results, and configuring yt-dlp options.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_ringtone_bot.domain.shared.types import NonEmptyStr, PositiveInt

CACHE_TTL: Final[int] = 3600
CACHE_MAX_SIZE: Final[int] = 500
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
LOG_URL_TRUNCATE: Final[int] = 60


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None

    @property
    def has_audio(self) -> bool:
        return self.url is not None and self.acodec not in (None, "none")


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result.

    Extra fields from yt-dlp are silently ignored, keeping cached entries small.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    webpage_url: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = "Unknown Title"
    acodec: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("webpage_url", "url", "acodec", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return "Unknown Title"
        return v

    @property
    def stream_url(self) -> str | None:
        """Direct media URL with an audio track, or None if there is none.

        A top-level ``url`` is what yt-dlp picked for the requested format; it
        only counts when that format is not explicitly video-only.
        """
        if self.url and self.acodec != "none":
            return self.url
        audio_formats = [f for f in self.formats if f.has_audio]
        if audio_formats:
            return audio_formats[-1].url
        return None


class CacheEntry(BaseModel):
    """Cached yt-dlp extraction result with its timestamp."""

    model_config = ConfigDict(frozen=True)

    info: YtDlpTrackInfo
    cached_at: float = Field(ge=0.0)


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
