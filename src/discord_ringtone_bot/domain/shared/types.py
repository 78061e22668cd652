"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the app is defined here once,
so models can simply annotate their fields::

    from discord_ringtone_bot.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""


# ── Datetime constraints ────────────────────────────────────────────


def _require_tz(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return value


UtcDatetimeField = Annotated[datetime, AfterValidator(_require_tz)]
"""Timezone-aware datetime."""


# ── Aliases for identifier fields ───────────────────────────────────

GuildIdField = DiscordSnowflake
ChannelIdField = DiscordSnowflake
UserIdField = DiscordSnowflake
