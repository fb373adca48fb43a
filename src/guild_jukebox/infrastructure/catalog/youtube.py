"""YouTube catalog lookups using yt-dlp."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.music.urls import is_youtube_video_url, youtube_watch_url
from guild_jukebox.domain.music.value_objects import TrackSource
from guild_jukebox.domain.shared.messages import LogTemplates
from guild_jukebox.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH: Final[int] = 500
MAX_DURATION_SECONDS: Final[int] = 86_400

_info_cache: dict[str, CacheEntry] = {}


def clear_info_cache() -> None:
    _info_cache.clear()


class YouTubeCatalog:
    """Searches YouTube and looks up single videos.

    Searches use flat extraction so no formats are resolved per result; the
    stream itself is produced later by the provider chain.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._info_opts = YtDlpOpts(cookiefile=self._settings.cookie_file)
        self._search_opts = self._info_opts.model_copy(update={"extract_flat": "in_playlist"})

    @staticmethod
    def info_to_track(info: YtDlpTrackInfo) -> Track | None:
        url = info.webpage_url
        if not url or not is_youtube_video_url(url):
            if info.url and is_youtube_video_url(info.url):
                url = info.url
            elif info.id:
                url = youtube_watch_url(info.id)

        if not url or not is_youtube_video_url(url):
            logger.debug("Skipping yt-dlp entry without a video URL: %s", info.title)
            return None

        duration = info.duration if info.duration and info.duration <= MAX_DURATION_SECONDS else None
        return Track(
            title=info.title[:MAX_TITLE_LENGTH],
            canonical_url=url,
            source=TrackSource.YOUTUBE,
            duration_seconds=duration,
            playback_url=url,
        )

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        now = time.time()
        cached = _info_cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.info
            _info_cache.pop(url, None)

        try:
            with YoutubeDL(params=cast(Any, self._info_opts.to_params())) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            return None

        result = YtDlpTrackInfo.model_validate(dict(data)) if isinstance(data, dict) else None
        _info_cache[url] = CacheEntry(info=result, cached_at=now)

        if len(_info_cache) > CACHE_MAX_SIZE:
            expired = [k for k, entry in _info_cache.items() if now - entry.cached_at >= CACHE_TTL]
            for k in expired:
                _info_cache.pop(k, None)
            if expired:
                logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

        return result

    def _search_sync(self, query: str, limit: int) -> list[YtDlpTrackInfo]:
        try:
            with YoutubeDL(params=cast(Any, self._search_opts.to_params())) as ydl:
                data = ydl.extract_info(f"ytsearch{limit}:{query}", download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, query)
            return []

        if not isinstance(data, dict):
            return []
        entries = data.get("entries") or []
        return [YtDlpTrackInfo.model_validate(dict(e)) for e in entries if isinstance(e, dict)]

    async def lookup(self, url: str) -> Track | None:
        """Fetch a single video's metadata."""
        info = await asyncio.to_thread(self._extract_info_sync, url)
        return self.info_to_track(info) if info else None

    async def search(self, query: str, limit: int = 10) -> list[Track]:
        results = await asyncio.to_thread(self._search_sync, query, limit)
        tracks = (self.info_to_track(info) for info in results)
        return [track for track in tracks if track is not None]
