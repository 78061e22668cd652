"""Prefix commands: join, leave, mute, unmute, play, ping, help, upload, delete."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_ringtone_bot.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_ringtone_bot.domain.voice.events import CommandKind, CommandMessage, UploadedFile

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def author_voice_channel_id(author: discord.abc.User) -> int | None:
    voice = getattr(author, "voice", None)
    if voice is None or voice.channel is None:
        return None
    return voice.channel.id


def build_command_message(
    ctx: commands.Context,
    kind: CommandKind,
    args: tuple[str, ...] = (),
    attachments: tuple[UploadedFile, ...] = (),
) -> CommandMessage:
    guild = ctx.guild
    return CommandMessage(
        guild_id=guild.id if guild is not None else None,
        guild_name=guild.name if guild is not None else "",
        channel_id=ctx.channel.id,
        author_id=ctx.author.id,
        author_name=ctx.author.name,
        author_voice_channel_id=author_voice_channel_id(ctx.author),
        command=kind,
        args=args,
        attachments=attachments,
    )


class CommandCog(commands.Cog):
    """Turns prefix commands into ``CommandMessage`` and hands them to the dispatcher."""

    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _run(
        self,
        ctx: commands.Context,
        kind: CommandKind,
        args: tuple[str, ...] = (),
        attachments: tuple[UploadedFile, ...] = (),
    ) -> str:
        message = build_command_message(ctx, kind, args, attachments)
        return await self.container.command_dispatcher.handle(message)

    @commands.command(name="join")
    async def join(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.JOIN)

    @commands.command(name="leave")
    async def leave(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.LEAVE)

    @commands.command(name="mute")
    async def mute(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.MUTE)

    @commands.command(name="unmute")
    async def unmute(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.UNMUTE)

    @commands.command(name="play")
    async def play(self, ctx: commands.Context, url: str | None = None) -> None:
        await self._run(ctx, CommandKind.PLAY, (url,) if url else ())

    @commands.command(name="ping")
    async def ping(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.PING)

    @commands.command(name="help")
    async def help(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.HELP)

    @commands.command(name="upload")
    async def upload(self, ctx: commands.Context) -> None:
        attachments: list[UploadedFile] = []
        for attachment in ctx.message.attachments[:1]:
            try:
                data = await attachment.read()
            except discord.HTTPException as exc:
                logger.warning("Error downloading attachment %s: %r", attachment.filename, exc)
                await self.container.reply_sink.send(
                    ctx.channel.id, DiscordUIMessages.RINGTONE_DOWNLOAD_FAILED
                )
                return
            attachments.append(UploadedFile(filename=attachment.filename, data=data))

        await self._run(ctx, CommandKind.UPLOAD, attachments=tuple(attachments))

    @commands.command(name="delete")
    async def delete(self, ctx: commands.Context) -> None:
        await self._run(ctx, CommandKind.DELETE)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(CommandCog(bot, container))
