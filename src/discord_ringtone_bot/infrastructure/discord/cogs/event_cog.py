"""Discord event listeners for lifecycle, voice presence and command errors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_ringtone_bot.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_ringtone_bot.domain.voice.events import VoiceStateEvent

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def build_voice_state_event(
    member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
) -> VoiceStateEvent:
    return VoiceStateEvent(
        guild_id=member.guild.id,
        guild_name=member.guild.name,
        user_id=member.id,
        user_name=member.name,
        user_is_bot=member.bot,
        old_channel_id=before.channel.id if before.channel is not None else None,
        new_channel_id=after.channel.id if after.channel is not None else None,
    )


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._resumed_logged_once = False

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_connect(self) -> None:
        logger.info("WebSocket connected")

    @commands.Cog.listener()
    async def on_disconnect(self) -> None:
        logger.warning("WebSocket disconnected")

    @commands.Cog.listener()
    async def on_resumed(self) -> None:
        if not self._resumed_logged_once:
            logger.info("WebSocket session resumed")
            self._resumed_logged_once = True

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info("Left guild: %s (%s)", guild.name, guild.id)
        await self.container.voice_session_service.leave(guild.id)

    # ─────────────────────────────────────────────────────────────────
    # Voice Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        before_id = before.channel.id if before.channel is not None else None
        after_id = after.channel.id if after.channel is not None else None
        if before_id == after_id:
            # mute/deafen/stream toggles
            return

        event = build_voice_state_event(member, before, after)
        transition = await self.container.voice_session_service.handle_voice_state(event)
        logger.debug(
            "Voice state %s -> %s for %s in guild %s: %s",
            before_id,
            after_id,
            member.id,
            member.guild.id,
            transition.value,
        )

    # ─────────────────────────────────────────────────────────────────
    # Command Error Handler
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            logger.debug("Unknown command from %s: %s", getattr(ctx.author, "id", "?"), error)
            return

        logger.error(
            "Unhandled error in command '%s'",
            getattr(ctx.command, "qualified_name", "<unknown>"),
            exc_info=error,
        )
        try:
            await ctx.send(DiscordUIMessages.ERROR_COMMAND_FAILED_SEE_LOGS)
        except discord.HTTPException:
            logger.debug("Could not report command error in channel %s", ctx.channel.id)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
