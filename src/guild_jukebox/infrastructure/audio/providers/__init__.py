"""Stream providers, in the order the provider chain tries them."""

from guild_jukebox.infrastructure.audio.providers.innertube import InnertubeProvider
from guild_jukebox.infrastructure.audio.providers.ytdlp_library import YtDlpLibraryProvider
from guild_jukebox.infrastructure.audio.providers.ytdlp_process import YtDlpProcessProvider

__all__ = [
    "InnertubeProvider",
    "YtDlpLibraryProvider",
    "YtDlpProcessProvider",
]
