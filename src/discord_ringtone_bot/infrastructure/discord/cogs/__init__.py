"""Discord cogs - event listeners and prefix commands."""

from discord_ringtone_bot.infrastructure.discord.cogs.command_cog import CommandCog
from discord_ringtone_bot.infrastructure.discord.cogs.event_cog import EventCog

__all__ = [
    "CommandCog",
    "EventCog",
]
