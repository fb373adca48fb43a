"""Spotify catalog lookups using spotipy."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials

from guild_jukebox.config.settings import SpotifySettings
from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.music.value_objects import TrackSource
from guild_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


def format_spotify_title(item: dict[str, Any]) -> str:
    """``"Name - Artist, Artist"`` for a Spotify track object."""
    artists = ", ".join(a["name"] for a in item.get("artists", []) if a.get("name"))
    name = item.get("name") or "Unknown title"
    return f"{name} - {artists}" if artists else name


class SpotifyCatalog:
    """Track metadata from Spotify.

    Spotify tracks cannot be streamed; each one carries a search hint so the
    catalog service can find a YouTube surrogate when it is played.
    """

    def __init__(
        self, settings: SpotifySettings | None = None, *, client: spotipy.Spotify | None = None
    ) -> None:
        self._settings = settings or SpotifySettings()
        if client is None and self._settings.enabled:
            client = spotipy.Spotify(
                client_credentials_manager=SpotifyClientCredentials(
                    client_id=self._settings.client_id,
                    client_secret=self._settings.client_secret.get_secret_value(),
                )
            )
        self._client = client
        if self._client is None:
            logger.info(LogTemplates.SPOTIFY_DISABLED)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @staticmethod
    def item_to_track(item: dict[str, Any]) -> Track | None:
        url = (item.get("external_urls") or {}).get("spotify")
        if not url:
            return None
        title = format_spotify_title(item)[:500]
        duration_ms = item.get("duration_ms") or 0
        return Track(
            title=title,
            canonical_url=url,
            source=TrackSource.SPOTIFY,
            duration_seconds=duration_ms // 1000,
            search_hint=title,
        )

    async def get_track(self, track_id: str) -> Track | None:
        if self._client is None:
            logger.warning(LogTemplates.SPOTIFY_DISABLED)
            return None

        try:
            item = await asyncio.to_thread(self._client.track, track_id)
        except Exception:
            logger.exception(LogTemplates.SPOTIFY_LOOKUP_FAILED, track_id)
            return None

        track = self.item_to_track(item) if item else None
        if track is not None:
            logger.debug(LogTemplates.SPOTIFY_TRACK_FETCHED, track.title)
        return track

    async def search(self, query: str, limit: int = 10) -> list[Track]:
        if self._client is None:
            return []

        try:
            response = await asyncio.to_thread(
                self._client.search, q=query, limit=limit, type="track"
            )
        except Exception:
            logger.exception(LogTemplates.SPOTIFY_SEARCH_FAILED, query)
            return []

        items = ((response or {}).get("tracks") or {}).get("items") or []
        tracks = (self.item_to_track(item) for item in items if item)
        return [track for track in tracks if track is not None]
