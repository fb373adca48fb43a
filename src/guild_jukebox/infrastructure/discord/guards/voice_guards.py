"""Reusable voice-channel guard functions for Discord slash commands.

These are free functions that take the interaction explicitly rather than
relying on a specific cog instance, making them usable from any cog.
"""

from __future__ import annotations

import discord

from guild_jukebox.domain.shared.messages import DiscordUIMessages


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return None

    return user


async def ensure_guild(interaction: discord.Interaction) -> discord.Guild | None:
    """Return the interaction's guild, replying with an error in DMs."""
    if interaction.guild is None:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
    return interaction.guild


async def ensure_user_voice_channel(
    interaction: discord.Interaction, *, require_same_channel: bool = True
) -> discord.VoiceChannel | discord.StageChannel | None:
    """Return the caller's voice channel if they may control playback from it.

    The caller must be a guild member in a voice channel. With
    ``require_same_channel``, a bot already connected elsewhere in the guild
    must be in that same channel.
    """
    member = await get_member(interaction)
    if member is None:
        return None

    channel = member.voice.channel if member.voice else None
    if channel is None:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return None

    if not require_same_channel:
        return channel

    assert interaction.guild is not None
    bot_voice = interaction.guild.me.voice if interaction.guild.me else None
    if bot_voice and bot_voice.channel and bot_voice.channel.id != channel.id:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SAME_CHANNEL_REQUIRED)
        return None

    return channel
