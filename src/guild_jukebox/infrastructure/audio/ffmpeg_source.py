"""
FFmpeg Audio Source

Builds the discord.py audio source for an ``AudioStream``: FFmpeg decodes
whatever container the provider produced into PCM and a volume transformer
sits on top.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field

import discord

from guild_jukebox.application.interfaces.stream_provider import AudioStream
from guild_jukebox.config.settings import AudioSettings

ANDROID_USER_AGENT = "com.google.android.youtube/19.02.39 (Linux; U; Android 14)"

DEFAULT_HTTP_HEADERS: dict[str, str] = {
    "User-Agent": ANDROID_USER_AGENT,
    "Referer": "https://www.youtube.com/",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass
class FFmpegConfig:
    """Configuration for FFmpeg audio processing."""

    # Reconnection flags only make sense for network inputs.
    network_before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    options: str = "-vn"
    default_volume: float = 0.5
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HTTP_HEADERS))

    @classmethod
    def from_settings(cls, settings: AudioSettings) -> FFmpegConfig:
        return cls(
            network_before_options=settings.ffmpeg_before_options,
            options=settings.ffmpeg_options,
            default_volume=settings.default_volume,
        )

    def get_before_options(self, stream: AudioStream) -> str:
        """FFmpeg input options for ``stream``."""
        opts: list[str] = []
        if stream.container.ffmpeg_format:
            opts.append(f"-f {stream.container.ffmpeg_format}")

        if not stream.is_piped:
            if self.network_before_options:
                opts.append(self.network_before_options)
            headers = {**self.default_headers, **stream.http_headers}
            if headers:
                header_block = "".join(f"{k}: {v}\r\n" for k, v in headers.items())
                opts.append(f"-headers {shlex.quote(header_block)}")

        return " ".join(opts)


def create_audio_source(
    stream: AudioStream, config: FFmpegConfig, volume: float | None = None
) -> discord.PCMVolumeTransformer:
    """Create a PCM source for ``stream`` wrapped in a volume transformer.

    Raises:
        ValueError: If the stream has already been closed.
    """
    if stream.closed:
        raise ValueError(f"{stream.provider} stream for {stream.location} is closed")

    before_options = config.get_before_options(stream)
    if stream.is_piped:
        source = discord.FFmpegPCMAudio(
            stream.pipe, pipe=True, before_options=before_options, options=config.options
        )
    else:
        source = discord.FFmpegPCMAudio(
            stream.source_url, before_options=before_options, options=config.options
        )

    vol = volume if volume is not None else config.default_volume
    return discord.PCMVolumeTransformer(source, volume=vol)
