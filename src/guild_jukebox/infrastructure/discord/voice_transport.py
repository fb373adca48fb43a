"""Discord voice transport implementing VoiceTransport for one guild."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from guild_jukebox.application.interfaces.voice_transport import (
    StreamEndCallback,
    TransportFactory,
    VoiceChannelLike,
    VoiceTransport,
)
from guild_jukebox.domain.shared.messages import LogTemplates
from guild_jukebox.infrastructure.audio.ffmpeg_source import FFmpegConfig, create_audio_source

if TYPE_CHECKING:
    from guild_jukebox.application.interfaces.stream_provider import AudioStream

logger = logging.getLogger(__name__)


def _as_voice_channel(channel: VoiceChannelLike) -> discord.VoiceChannel | discord.StageChannel:
    if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
        raise TypeError(f"Channel {channel.id} is not a voice channel")
    return channel


class DiscordVoiceTransport(VoiceTransport):
    """Wraps the guild's ``discord.VoiceClient``.

    discord.py invokes the ``after`` hook on its player thread; the hook
    releases the stream there and hands the end signal to the event loop.
    """

    def __init__(
        self, bot: discord.Client, guild_id: int, *, ffmpeg: FFmpegConfig | None = None
    ) -> None:
        self._bot = bot
        self._guild_id = guild_id
        self._ffmpeg = ffmpeg or FFmpegConfig()

    def _get_voice_client(self) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(self._guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    @property
    def channel_id(self) -> int | None:
        vc = self._get_voice_client()
        if vc and vc.channel:
            return vc.channel.id
        return None

    def is_connected(self) -> bool:
        vc = self._get_voice_client()
        return vc is not None and vc.is_connected()

    async def connect(self, channel: VoiceChannelLike) -> None:
        voice_channel = _as_voice_channel(channel)

        vc = self._get_voice_client()
        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, self._guild_id)
            await vc.disconnect(force=True)

        await voice_channel.connect(self_deaf=True)
        await self._ensure_self_deaf(voice_channel)

    async def move_to(self, channel: VoiceChannelLike) -> None:
        vc = self._get_voice_client()
        if vc is None:
            await self.connect(channel)
            return

        voice_channel = _as_voice_channel(channel)
        await vc.move_to(voice_channel)
        await self._ensure_self_deaf(voice_channel)

    async def _ensure_self_deaf(
        self, channel: discord.VoiceChannel | discord.StageChannel
    ) -> None:
        """Ensure the bot is self-deafened in the guild's current voice connection."""
        try:
            await channel.guild.change_voice_state(channel=channel, self_deaf=True)
        except Exception as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, self._guild_id, exc)

    async def disconnect(self) -> None:
        vc = self._get_voice_client()
        if vc is None:
            return
        await vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, self._guild_id)

    def play(self, stream: AudioStream, after: StreamEndCallback) -> None:
        vc = self._get_voice_client()
        if vc is None or not vc.is_connected():
            raise discord.ClientException("Not connected to voice.")

        source = create_audio_source(stream, self._ffmpeg)
        loop = asyncio.get_running_loop()

        def after_callback(error: Exception | None = None) -> None:
            stream.close()
            loop.call_soon_threadsafe(after, error)

        try:
            vc.play(source, after=after_callback)
        except Exception:
            source.cleanup()
            raise

    def pause(self) -> bool:
        vc = self._get_voice_client()
        if vc is None or not vc.is_playing():
            return False
        vc.pause()
        return True

    def resume(self) -> bool:
        vc = self._get_voice_client()
        if vc is None or not vc.is_paused():
            return False
        vc.resume()
        return True

    def stop(self) -> bool:
        vc = self._get_voice_client()
        if vc is None or not (vc.is_playing() or vc.is_paused()):
            return False
        vc.stop()
        return True


def discord_transport_factory(bot: discord.Client, ffmpeg: FFmpegConfig) -> TransportFactory:
    """Factory the session registry calls once per new session."""

    def factory(guild_id: int) -> VoiceTransport:
        return DiscordVoiceTransport(bot, guild_id, ffmpeg=ffmpeg)

    return factory
