"""Ordered fallback over stream providers.

Before any provider runs, the chain makes sure the track points at a
directly streamable YouTube video: tracks from catalogs that cannot be
streamed are mapped to a surrogate through the catalog, and malformed
locations are recovered with a one-result search.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, NamedTuple

from guild_jukebox.domain.music.urls import is_youtube_video_url
from guild_jukebox.domain.shared.enums import SearchSource
from guild_jukebox.domain.shared.exceptions import (
    CatalogError,
    NoPlayableLocation,
    ResolutionFailure,
)
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from guild_jukebox.application.interfaces.catalog import Catalog
    from guild_jukebox.application.interfaces.stream_provider import AudioStream, StreamProvider
    from guild_jukebox.domain.music.entities import Track

logger = logging.getLogger(__name__)


class ChainResult(NamedTuple):
    """The (possibly re-resolved) track and its live stream."""

    track: Track
    stream: AudioStream


class ProviderChain:
    """Tries each provider in order until one produces a live stream."""

    def __init__(self, providers: Sequence[StreamProvider], catalog: Catalog | None = None) -> None:
        if not providers:
            raise ValueError("ProviderChain needs at least one provider")
        self._providers = tuple(providers)
        self._catalog = catalog

    @property
    def providers(self) -> tuple[StreamProvider, ...]:
        return self._providers

    async def open(self, track: Track) -> ChainResult:
        """Resolve ``track`` to a live audio stream.

        Raises:
            NoPlayableLocation: If no valid location can be found or every
                provider failed.
        """
        track = await self._ensure_streamable(track)
        location = await self._ensure_video_location(track)

        failures: list[ResolutionFailure] = []
        for provider in self._providers:
            logger.debug(LogTemplates.CHAIN_ATTEMPT, provider.name, location)
            try:
                stream = await provider.attempt(location)
            except ResolutionFailure as e:
                logger.warning(LogTemplates.CHAIN_PROVIDER_FAILED, provider.name, e.reason)
                failures.append(e)
                continue
            except Exception as e:
                logger.exception(LogTemplates.CHAIN_PROVIDER_FAILED, provider.name, repr(e))
                failures.append(ResolutionFailure(provider.name, location, repr(e)))
                continue

            logger.info(
                LogTemplates.CHAIN_PROVIDER_SUCCEEDED, provider.name, stream.container.value
            )
            return ChainResult(track, stream)

        logger.error(LogTemplates.CHAIN_EXHAUSTED, track.title)
        raise NoPlayableLocation(
            track.title,
            ErrorMessages.ALL_PROVIDERS_FAILED.format(count=len(failures)),
            failures,
        )

    async def _ensure_streamable(self, track: Track) -> Track:
        """Map a non-streamable track to a playable surrogate through the catalog."""
        if track.playback_url is not None or track.source.is_streamable:
            return track

        if self._catalog is None:
            raise NoPlayableLocation(track.title, ErrorMessages.SURROGATE_NOT_FOUND)

        try:
            resolved = await self._catalog.resolve_playable(track)
        except CatalogError as e:
            raise NoPlayableLocation(track.title, e.message) from e

        logger.info(
            LogTemplates.TRACK_SURROGATE, track.source.value, track.title, resolved.playback_url
        )
        return resolved

    async def _ensure_video_location(self, track: Track) -> str:
        location = track.location
        if is_youtube_video_url(location):
            return location

        logger.info(LogTemplates.CHAIN_LOCATION_INVALID, location, track.lookup_query)
        if self._catalog is not None:
            try:
                results = await self._catalog.search(
                    track.lookup_query, SearchSource.YOUTUBE, limit=1
                )
            except Exception as e:
                logger.warning(LogTemplates.CHAIN_RECOVERY_FAILED, track.lookup_query, e)
                results = []

            for candidate in results[:1]:
                if is_youtube_video_url(candidate.location):
                    logger.info(
                        LogTemplates.CHAIN_LOCATION_RECOVERED, candidate.location, track.title
                    )
                    return candidate.location

        raise NoPlayableLocation(track.title, ErrorMessages.NO_VALID_LOCATION)
