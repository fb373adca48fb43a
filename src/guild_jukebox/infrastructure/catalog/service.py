"""Catalog implementation combining YouTube and Spotify lookups."""

from __future__ import annotations

import logging
from typing import Final

from guild_jukebox.application.interfaces.catalog import Catalog
from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.music.urls import YOUTUBE_URL_PATTERN, extract_spotify_track_id
from guild_jukebox.domain.music.value_objects import TrackSource
from guild_jukebox.domain.shared.enums import SearchSource
from guild_jukebox.domain.shared.exceptions import CatalogError
from guild_jukebox.domain.shared.messages import ErrorMessages
from guild_jukebox.infrastructure.catalog.spotify import SpotifyCatalog
from guild_jukebox.infrastructure.catalog.youtube import YouTubeCatalog

logger = logging.getLogger(__name__)

PER_SOURCE_LIMIT: Final[int] = 10


class CatalogService(Catalog):
    """Routes queries to the right catalog.

    Spotify track URLs and YouTube video URLs are looked up directly; free
    text is searched on YouTube and then Spotify. ``source`` filters both: a
    URL from the other catalog yields no results.
    """

    def __init__(self, youtube: YouTubeCatalog, spotify: SpotifyCatalog | None = None) -> None:
        self._youtube = youtube
        self._spotify = spotify

    async def search(
        self, query: str, source: SearchSource = SearchSource.AUTO, limit: int = 20
    ) -> list[Track]:
        query = query.strip()
        if not query or limit <= 0:
            return []

        spotify_id = extract_spotify_track_id(query)
        if spotify_id is not None:
            if source is SearchSource.YOUTUBE:
                return []
            track = await self._spotify.get_track(spotify_id) if self._spotify else None
            return [track] if track else []

        if YOUTUBE_URL_PATTERN.search(query):
            if source is SearchSource.SPOTIFY:
                return []
            track = await self._youtube.lookup(query)
            return [track] if track else []

        per_source = min(limit, PER_SOURCE_LIMIT)
        results: list[Track] = []
        if source is not SearchSource.SPOTIFY:
            results.extend(await self._youtube.search(query, per_source))
        if source is not SearchSource.YOUTUBE and self._spotify is not None:
            results.extend(await self._spotify.search(query, per_source))

        return results[:limit]

    async def resolve_playable(self, track: Track) -> Track:
        if track.playback_url is not None:
            return track

        if track.source is TrackSource.SPOTIFY:
            logger.debug("Resolving Spotify track to YouTube: %s", track.lookup_query)
            results = await self._youtube.search(track.lookup_query, 1)
            if not results:
                raise CatalogError(ErrorMessages.SURROGATE_NOT_FOUND)
            return track.with_playback_url(results[0].canonical_url)

        if not track.canonical_url:
            raise CatalogError(ErrorMessages.MISSING_YOUTUBE_URL)
        return track
