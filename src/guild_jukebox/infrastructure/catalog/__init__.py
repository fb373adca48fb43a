"""Catalog adapters - YouTube (yt-dlp) and Spotify (spotipy) lookups."""

from guild_jukebox.infrastructure.catalog.service import CatalogService
from guild_jukebox.infrastructure.catalog.spotify import SpotifyCatalog
from guild_jukebox.infrastructure.catalog.youtube import YouTubeCatalog

__all__ = [
    "CatalogService",
    "SpotifyCatalog",
    "YouTubeCatalog",
]
