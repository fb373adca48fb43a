"""Voice channel guard functions for Discord cogs."""

from guild_jukebox.infrastructure.discord.guards.voice_guards import (
    ensure_guild,
    ensure_user_voice_channel,
    get_member,
    send_ephemeral,
)

__all__ = [
    "ensure_guild",
    "ensure_user_voice_channel",
    "get_member",
    "send_ephemeral",
]
