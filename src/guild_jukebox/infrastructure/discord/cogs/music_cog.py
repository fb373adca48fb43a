"""Slash-command music cog delegating to the playback engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_jukebox.domain.music.value_objects import PlaybackState
from guild_jukebox.domain.shared.enums import SearchSource
from guild_jukebox.domain.shared.exceptions import CatalogError, ConnectionTimeout
from guild_jukebox.domain.shared.messages import DiscordUIMessages
from guild_jukebox.infrastructure.discord.guards.voice_guards import (
    ensure_guild,
    ensure_user_voice_channel,
    send_ephemeral,
)
from guild_jukebox.utils.reply import format_duration, truncate

if TYPE_CHECKING:
    from guild_jukebox.config.container import Container
    from guild_jukebox.domain.music.entities import QueueSnapshot

logger = logging.getLogger(__name__)

QUEUE_PER_PAGE = 10

SOURCE_CHOICES = [
    app_commands.Choice(name="Auto", value=SearchSource.AUTO.value),
    app_commands.Choice(name="YouTube", value=SearchSource.YOUTUBE.value),
    app_commands.Choice(name="Spotify", value=SearchSource.SPOTIFY.value),
]


def build_queue_embed(snapshot: QueueSnapshot) -> discord.Embed:
    embed = discord.Embed(title=DiscordUIMessages.QUEUE_TITLE, color=discord.Color.blurple())

    if snapshot.current is not None:
        value = f"{snapshot.current.title} ({format_duration(snapshot.current.duration_seconds)})"
        if snapshot.state is PlaybackState.PAUSED:
            value += DiscordUIMessages.QUEUE_PAUSED_SUFFIX
        embed.add_field(name=DiscordUIMessages.QUEUE_NOW_PLAYING, value=value, inline=False)

    if not snapshot.upcoming:
        embed.description = DiscordUIMessages.QUEUE_EMPTY
        return embed

    embed.description = "\n".join(
        DiscordUIMessages.QUEUE_LINE.format(
            index=i,
            title=truncate(track.title),
            duration=format_duration(track.duration_seconds),
        )
        for i, track in enumerate(snapshot.upcoming[:QUEUE_PER_PAGE], start=1)
    )
    remaining = len(snapshot.upcoming) - QUEUE_PER_PAGE
    if remaining > 0:
        embed.set_footer(text=DiscordUIMessages.QUEUE_MORE.format(count=remaining))
    return embed


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song from YouTube or Spotify")
    @app_commands.describe(query="Song name or URL", source="Force a specific source")
    @app_commands.choices(source=SOURCE_CHOICES)
    async def play(
        self,
        interaction: discord.Interaction,
        query: str,
        source: app_commands.Choice[str] | None = None,
    ) -> None:
        channel = await ensure_user_voice_channel(interaction, require_same_channel=False)
        if channel is None:
            return

        await interaction.response.defer()

        search_source = SearchSource(source.value) if source else SearchSource.AUTO
        catalog = self.container.catalog
        results = await catalog.search(query, search_source)
        if not results:
            await interaction.followup.send(
                DiscordUIMessages.PLAY_NO_RESULTS.format(query=truncate(query, 60))
            )
            return

        first = results[0]
        try:
            playable = await catalog.resolve_playable(first)
        except CatalogError:
            await interaction.followup.send(
                DiscordUIMessages.PLAY_RESOLVE_FAILED.format(title=truncate(first.title, 60))
            )
            return

        playable = playable.with_requester(str(interaction.user))
        try:
            await self.container.playback_engine.play(channel, playable)
        except ConnectionTimeout:
            await send_ephemeral(interaction, DiscordUIMessages.PLAY_CONNECT_TIMEOUT)
            return

        await interaction.followup.send(
            DiscordUIMessages.PLAY_QUEUED.format(
                title=playable.title, source=playable.source.value.upper()
            )
        )

    # ─────────────────────────────────────────────────────────────────
    # Playback Controls
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="pause", description="Pause the current track")
    async def pause(self, interaction: discord.Interaction) -> None:
        if await ensure_user_voice_channel(interaction) is None:
            return
        assert interaction.guild is not None

        paused = self.container.playback_engine.pause(interaction.guild.id)
        await interaction.response.send_message(
            DiscordUIMessages.PAUSED if paused else DiscordUIMessages.NOTHING_TO_PAUSE
        )

    @app_commands.command(name="resume", description="Resume the paused track")
    async def resume(self, interaction: discord.Interaction) -> None:
        if await ensure_user_voice_channel(interaction) is None:
            return
        assert interaction.guild is not None

        resumed = self.container.playback_engine.resume(interaction.guild.id)
        await interaction.response.send_message(
            DiscordUIMessages.RESUMED if resumed else DiscordUIMessages.NOTHING_TO_RESUME
        )

    @app_commands.command(name="skip", description="Skip the current track")
    async def skip(self, interaction: discord.Interaction) -> None:
        if await ensure_user_voice_channel(interaction) is None:
            return
        assert interaction.guild is not None

        skipped = await self.container.playback_engine.skip(interaction.guild.id)
        if skipped is None:
            await interaction.response.send_message(DiscordUIMessages.NOTHING_TO_SKIP)
            return
        await interaction.response.send_message(
            DiscordUIMessages.SKIPPED.format(title=truncate(skipped.title, 60))
        )

    @app_commands.command(name="stop", description="Stop playback and clear the queue")
    async def stop(self, interaction: discord.Interaction) -> None:
        if await ensure_user_voice_channel(interaction) is None:
            return
        assert interaction.guild is not None

        await self.container.playback_engine.stop(interaction.guild.id)
        await interaction.response.send_message(DiscordUIMessages.STOPPED)

    @app_commands.command(name="leave", description="Disconnect from the voice channel")
    async def leave(self, interaction: discord.Interaction) -> None:
        if await ensure_user_voice_channel(interaction) is None:
            return
        assert interaction.guild is not None

        left = await self.container.playback_engine.leave(interaction.guild.id)
        await interaction.response.send_message(
            DiscordUIMessages.LEFT if left else DiscordUIMessages.NOT_CONNECTED
        )

    # ─────────────────────────────────────────────────────────────────
    # Queue
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="queue", description="Show the current music queue")
    async def queue(self, interaction: discord.Interaction) -> None:
        guild = await ensure_guild(interaction)
        if guild is None:
            return

        snapshot = self.container.playback_engine.get_state(guild.id)
        await interaction.response.send_message(embed=build_queue_embed(snapshot))

    @app_commands.command(name="clear", description="Clear all upcoming tracks")
    async def clear(self, interaction: discord.Interaction) -> None:
        if await ensure_user_voice_channel(interaction) is None:
            return
        assert interaction.guild is not None

        count = self.container.playback_engine.clear(interaction.guild.id)
        if count > 0:
            await interaction.response.send_message(
                DiscordUIMessages.CLEARED.format(count=count)
            )
        else:
            await interaction.response.send_message(DiscordUIMessages.CLEAR_NOTHING)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError("Container not found on bot instance")

    await bot.add_cog(MusicCog(bot, container))
