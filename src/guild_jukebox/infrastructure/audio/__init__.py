"""Audio infrastructure - stream providers, container probing and FFmpeg sources."""

from guild_jukebox.infrastructure.audio.ffmpeg_source import FFmpegConfig, create_audio_source
from guild_jukebox.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    ExtractorArgs,
    YtDlpOpts,
    YtDlpTrackInfo,
    YouTubeExtractorConfig,
)
from guild_jukebox.infrastructure.audio.probe import sniff_container

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "ExtractorArgs",
    "FFmpegConfig",
    "YtDlpOpts",
    "YtDlpTrackInfo",
    "YouTubeExtractorConfig",
    "create_audio_source",
    "sniff_container",
]
