"""Stream provider that talks to YouTube's innertube player API over httpx."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from guild_jukebox.application.interfaces.stream_provider import AudioStream, StreamProvider
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.music.urls import extract_youtube_video_id
from guild_jukebox.domain.shared.exceptions import ResolutionFailure
from guild_jukebox.domain.shared.messages import ErrorMessages
from guild_jukebox.infrastructure.audio.ffmpeg_source import ANDROID_USER_AGENT
from guild_jukebox.infrastructure.audio.probe import container_from_mime, sniff_container

logger = logging.getLogger(__name__)

PLAYER_ENDPOINT: Final[str] = "https://www.youtube.com/youtubei/v1/player"

ANDROID_CLIENT_CONTEXT: Final[dict[str, Any]] = {
    "clientName": "ANDROID",
    "clientVersion": "19.02.39",
    "androidSdkVersion": 34,
    "hl": "en",
    "gl": "US",
}

DEFAULT_TIMEOUT: Final = httpx.Timeout(15.0, connect=5.0)


# ── Pydantic models for the player response ────────────────────────────


class _InnertubeModel(BaseModel):
    model_config = ConfigDict(
        frozen=True, extra="ignore", alias_generator=to_camel, populate_by_name=True
    )


class InnertubeFormat(_InnertubeModel):
    itag: int | None = None
    url: str | None = None
    mime_type: str = ""
    bitrate: int = 0

    @property
    def is_audio(self) -> bool:
        return self.mime_type.startswith("audio/")


class StreamingData(_InnertubeModel):
    adaptive_formats: list[InnertubeFormat] = Field(default_factory=list)


class PlayabilityStatus(_InnertubeModel):
    status: str = "UNKNOWN"
    reason: str | None = None


class PlayerResponse(_InnertubeModel):
    playability_status: PlayabilityStatus = Field(default_factory=PlayabilityStatus)
    streaming_data: StreamingData | None = None

    def best_audio_format(self) -> InnertubeFormat | None:
        """Highest-bitrate audio-only adaptive format carrying a direct URL."""
        if self.streaming_data is None:
            return None
        candidates = [f for f in self.streaming_data.adaptive_formats if f.is_audio and f.url]
        return max(candidates, key=lambda f: f.bitrate, default=None)


# ── Provider ───────────────────────────────────────────────────────────


class InnertubeProvider(StreamProvider):
    """Asks the innertube ``player`` endpoint for adaptive formats directly.

    The chosen format's first bytes are fetched with a ranged GET so a URL
    that YouTube refuses to serve fails here rather than inside FFmpeg.
    """

    name = "innertube"

    def __init__(
        self, settings: AudioSettings | None = None, *, client: httpx.AsyncClient | None = None
    ) -> None:
        self._settings = settings or AudioSettings()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=DEFAULT_TIMEOUT,
                headers={"User-Agent": ANDROID_USER_AGENT},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def attempt(self, url: str) -> AudioStream:
        video_id = extract_youtube_video_id(url)
        if video_id is None:
            raise ResolutionFailure(self.name, url, ErrorMessages.NO_VIDEO_ID)

        player = await self._fetch_player(video_id, url)
        status = player.playability_status
        if status.status != "OK":
            raise ResolutionFailure(
                self.name, url, ErrorMessages.PLAYABILITY.format(status=status.reason or status.status)
            )

        fmt = player.best_audio_format()
        if fmt is None or fmt.url is None:
            raise ResolutionFailure(self.name, url, ErrorMessages.NO_AUDIO_FORMAT)

        head = await self._probe(fmt.url, url)
        container = sniff_container(head)
        if not container.is_known:
            container = container_from_mime(fmt.mime_type)

        logger.debug("innertube picked itag %s (%s) for %s", fmt.itag, fmt.mime_type, url)
        return AudioStream(
            provider=self.name,
            location=url,
            container=container,
            source_url=fmt.url,
            http_headers={"User-Agent": ANDROID_USER_AGENT},
        )

    async def _fetch_player(self, video_id: str, url: str) -> PlayerResponse:
        payload = {
            "videoId": video_id,
            "context": {"client": ANDROID_CLIENT_CONTEXT},
            "contentCheckOk": True,
            "racyCheckOk": True,
        }
        try:
            response = await self._get_client().post(
                PLAYER_ENDPOINT, params={"prettyPrint": "false"}, json=payload
            )
            response.raise_for_status()
            return PlayerResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise ResolutionFailure(self.name, url, repr(e)) from e

    async def _probe(self, media_url: str, url: str) -> bytes:
        timeout = self._settings.probe_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                response = await self._get_client().get(
                    media_url, headers={"Range": f"bytes=0-{self._settings.probe_bytes - 1}"}
                )
                response.raise_for_status()
        except TimeoutError as e:
            raise ResolutionFailure(
                self.name, url, ErrorMessages.PROBE_TIMEOUT.format(timeout=timeout)
            ) from e
        except httpx.HTTPError as e:
            raise ResolutionFailure(self.name, url, repr(e)) from e

        if not response.content:
            raise ResolutionFailure(self.name, url, ErrorMessages.EMPTY_PROBE)
        return response.content
