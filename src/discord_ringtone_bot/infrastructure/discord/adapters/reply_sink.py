"""ReplySink that posts to Discord text channels."""

from __future__ import annotations

import logging

import discord

from discord_ringtone_bot.application.interfaces.reply_sink import ReplySink
from discord_ringtone_bot.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class DiscordReplySink(ReplySink):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def send(self, channel_id: int, text: str) -> bool:
        channel = self._bot.get_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            logger.warning(LogTemplates.REPLY_CHANNEL_NOT_FOUND, channel_id)
            return False

        try:
            await channel.send(text)
            return True
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.REPLY_SEND_FAILED, channel_id, exc)
            return False
