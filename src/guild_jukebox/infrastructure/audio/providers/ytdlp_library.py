"""Stream provider that runs yt-dlp in-process to find a direct media URL."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, cast

from yt_dlp import YoutubeDL
from yt_dlp.utils import YoutubeDLError

from guild_jukebox.application.interfaces.stream_provider import AudioStream, StreamProvider
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.shared.exceptions import ResolutionFailure
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.audio.models import (
    PRIMARY_PLAYER_CLIENTS,
    SECONDARY_PLAYER_CLIENTS,
    ExtractorArgs,
    YouTubeExtractorConfig,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from guild_jukebox.infrastructure.audio.probe import container_from_codec

logger = logging.getLogger(__name__)


class YtDlpLibraryProvider(StreamProvider):
    """Extracts the selected audio format's URL with ``yt_dlp.YoutubeDL``.

    FFmpeg opens the URL itself, so no bytes are probed here; the container
    comes from the codec yt-dlp declares for the format.
    """

    def __init__(
        self,
        settings: AudioSettings | None = None,
        *,
        name: str = "yt-dlp-library",
        player_clients: Sequence[str] = PRIMARY_PLAYER_CLIENTS,
        format_selector: str | None = None,
    ) -> None:
        self._settings = settings or AudioSettings()
        self.name = name
        self._opts = YtDlpOpts(
            format=format_selector or self._settings.ytdlp_format,
            cookiefile=self._settings.cookie_file,
            extractor_args=ExtractorArgs(
                youtube=YouTubeExtractorConfig(player_client=list(player_clients))
            ),
        )

    @classmethod
    def primary(cls, settings: AudioSettings) -> YtDlpLibraryProvider:
        return cls(settings, name="yt-dlp-library")

    @classmethod
    def secondary(cls, settings: AudioSettings) -> YtDlpLibraryProvider:
        """Alternate player clients and an m4a-first selector."""
        return cls(
            settings,
            name="yt-dlp-library-alt",
            player_clients=SECONDARY_PLAYER_CLIENTS,
            format_selector=settings.secondary_format,
        )

    @property
    def opts(self) -> YtDlpOpts:
        return self._opts

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        with YoutubeDL(params=cast(Any, self._opts.to_params())) as ydl:
            data = ydl.extract_info(url, download=False)
        return YtDlpTrackInfo.model_validate(dict(data)) if isinstance(data, dict) else None

    async def attempt(self, url: str) -> AudioStream:
        try:
            info = await asyncio.to_thread(self._extract_info_sync, url)
        except YoutubeDLError as e:
            logger.debug(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            raise ResolutionFailure(
                self.name, url, ErrorMessages.EXTRACTION_FAILED.format(error=e)
            ) from e

        if info is None:
            raise ResolutionFailure(self.name, url, ErrorMessages.NO_AUDIO_FORMAT)

        if info.url:
            source_url, ext, acodec, headers = info.url, info.ext, info.acodec, info.http_headers
        else:
            fmt = info.best_audio_format()
            if fmt is None or fmt.url is None:
                raise ResolutionFailure(self.name, url, ErrorMessages.NO_AUDIO_FORMAT)
            source_url, ext, acodec, headers = fmt.url, fmt.ext, fmt.acodec, fmt.http_headers

        return AudioStream(
            provider=self.name,
            location=url,
            container=container_from_codec(ext, acodec),
            source_url=source_url,
            http_headers=dict(headers),
        )
