"""Tests for the innertube player API stream provider."""

import json

import httpx
import pytest

from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.music.value_objects import StreamContainer
from guild_jukebox.domain.shared.exceptions import ResolutionFailure
from guild_jukebox.infrastructure.audio.providers.innertube import (
    PLAYER_ENDPOINT,
    InnertubeProvider,
    PlayerResponse,
)

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

PLAYABLE = {
    "playabilityStatus": {"status": "OK"},
    "streamingData": {
        "adaptiveFormats": [
            {"itag": 137, "url": "https://media.example/137", "mimeType": 'video/mp4; codecs="avc1"', "bitrate": 4000000},
            {"itag": 140, "url": "https://media.example/140", "mimeType": 'audio/mp4; codecs="mp4a.40.2"', "bitrate": 130000},
            {"itag": 251, "url": "https://media.example/251", "mimeType": 'audio/webm; codecs="opus"', "bitrate": 150000},
            {"itag": 999, "mimeType": 'audio/webm; codecs="opus"', "bitrate": 999999},
        ]
    },
}


class FakeYouTube:
    """Serves the player endpoint and media probes through httpx.MockTransport."""

    def __init__(self, player=PLAYABLE, media=b"\x1a\x45\xdf\xa3rest", player_status=200):
        self.player = player
        self.media = media
        self.player_status = player_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url).startswith(PLAYER_ENDPOINT):
            return httpx.Response(self.player_status, json=self.player)
        return httpx.Response(206, content=self.media)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def settings():
    return AudioSettings(probe_bytes=1024)


class TestInnertubeProvider:
    async def test_picks_best_audio_format(self, settings):
        youtube = FakeYouTube()
        async with youtube.client() as client:
            provider = InnertubeProvider(settings, client=client)
            stream = await provider.attempt(URL)

        assert stream.source_url == "https://media.example/251"
        assert stream.container is StreamContainer.WEBM
        assert stream.provider == "innertube"

        player_request, probe_request = youtube.requests
        body = json.loads(player_request.content)
        assert body["videoId"] == "dQw4w9WgXcQ"
        assert body["context"]["client"]["clientName"] == "ANDROID"
        assert probe_request.headers["Range"] == "bytes=0-1023"

    async def test_unknown_probe_falls_back_to_mime(self, settings):
        player = {
            "playabilityStatus": {"status": "OK"},
            "streamingData": {
                "adaptiveFormats": [
                    {"itag": 140, "url": "https://media.example/140", "mimeType": "audio/mp4", "bitrate": 1}
                ]
            },
        }
        youtube = FakeYouTube(player=player, media=b"garbage bytes")
        async with youtube.client() as client:
            stream = await InnertubeProvider(settings, client=client).attempt(URL)

        assert stream.container is StreamContainer.MP4

    async def test_unplayable_video(self, settings):
        player = {"playabilityStatus": {"status": "LOGIN_REQUIRED", "reason": "Sign in"}}
        async with FakeYouTube(player=player).client() as client:
            with pytest.raises(ResolutionFailure) as exc_info:
                await InnertubeProvider(settings, client=client).attempt(URL)

        assert "Sign in" in exc_info.value.reason

    async def test_no_audio_formats(self, settings):
        player = {"playabilityStatus": {"status": "OK"}, "streamingData": {"adaptiveFormats": []}}
        async with FakeYouTube(player=player).client() as client:
            with pytest.raises(ResolutionFailure):
                await InnertubeProvider(settings, client=client).attempt(URL)

    async def test_player_http_error(self, settings):
        async with FakeYouTube(player_status=500).client() as client:
            with pytest.raises(ResolutionFailure):
                await InnertubeProvider(settings, client=client).attempt(URL)

    async def test_empty_probe(self, settings):
        youtube = FakeYouTube(media=b"")
        async with youtube.client() as client:
            with pytest.raises(ResolutionFailure):
                await InnertubeProvider(settings, client=client).attempt(URL)

    async def test_non_video_url_makes_no_requests(self, settings):
        youtube = FakeYouTube()
        async with youtube.client() as client:
            with pytest.raises(ResolutionFailure):
                await InnertubeProvider(settings, client=client).attempt(
                    "https://www.youtube.com/playlist?list=PL1"
                )

        assert youtube.requests == []

    async def test_aclose_leaves_injected_client_open(self, settings):
        async with FakeYouTube().client() as client:
            provider = InnertubeProvider(settings, client=client)
            await provider.aclose()

            assert not client.is_closed


class TestPlayerResponse:
    def test_camel_case_parsing(self):
        response = PlayerResponse.model_validate(PLAYABLE)

        assert response.playability_status.status == "OK"
        best = response.best_audio_format()
        assert best.itag == 251
        assert best.mime_type.startswith("audio/webm")

    def test_missing_streaming_data(self):
        assert PlayerResponse.model_validate({}).best_audio_format() is None
