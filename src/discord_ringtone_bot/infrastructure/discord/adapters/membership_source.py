"""MembershipSource backed by the Discord gateway's member cache."""

from __future__ import annotations

import discord

from discord_ringtone_bot.domain.voice.presence import ChannelMember, MembershipSource


class DiscordMembershipSource(MembershipSource):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    def channel_members(self, guild_id: int, channel_id: int) -> list[ChannelMember]:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            return []

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            return []

        return [ChannelMember(user_id=member.id, is_bot=member.bot) for member in channel.members]
