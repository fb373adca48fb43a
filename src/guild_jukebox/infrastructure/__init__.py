"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, voice transport, cogs)
- Audio (stream providers, FFmpeg)
- Catalog (YouTube and Spotify metadata)
"""

from guild_jukebox.infrastructure.discord.bot import create_bot
from guild_jukebox.infrastructure.discord.voice_transport import DiscordVoiceTransport

__all__ = [
    "create_bot",
    "DiscordVoiceTransport",
]
