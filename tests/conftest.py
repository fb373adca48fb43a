import asyncio
import io
from types import SimpleNamespace

import pytest

from guild_jukebox.application.interfaces.catalog import Catalog
from guild_jukebox.application.interfaces.stream_provider import AudioStream, StreamProvider
from guild_jukebox.application.interfaces.voice_transport import VoiceTransport
from guild_jukebox.domain.music.entities import Track
from guild_jukebox.domain.music.value_objects import StreamContainer, TrackSource
from guild_jukebox.domain.shared.enums import SearchSource
from guild_jukebox.domain.shared.exceptions import CatalogError, ResolutionFailure

# ============================================================================
# Fakes
# ============================================================================


class FakeTransport(VoiceTransport):
    """In-memory voice transport.

    ``play`` records the stream and its ``after`` hook; ``finish()`` plays the
    part of the voice client reaching the end of the audio. ``stop`` fires the
    hook the way discord.py does when a stream is interrupted.
    """

    def __init__(self, guild_id: int = 1) -> None:
        self.guild_id = guild_id
        self._channel_id: int | None = None
        self.connect_calls: list[int] = []
        self.move_calls: list[int] = []
        self.disconnect_calls = 0
        self.played: list[AudioStream] = []
        self.connect_delay = 0.0
        self.fail_play = False
        self.paused = False
        self._after = None

    @property
    def channel_id(self) -> int | None:
        return self._channel_id

    def is_connected(self) -> bool:
        return self._channel_id is not None

    async def connect(self, channel) -> None:
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        self.connect_calls.append(channel.id)
        self._channel_id = channel.id

    async def move_to(self, channel) -> None:
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        self.move_calls.append(channel.id)
        self._channel_id = channel.id

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._channel_id = None

    @property
    def is_streaming(self) -> bool:
        return self._after is not None

    def play(self, stream, after) -> None:
        if self.fail_play:
            raise RuntimeError("voice client refused the source")
        self.played.append(stream)
        self.paused = False
        self._after = after

    def pause(self) -> bool:
        if self._after is None or self.paused:
            return False
        self.paused = True
        return True

    def resume(self) -> bool:
        if self._after is None or not self.paused:
            return False
        self.paused = False
        return True

    def stop(self) -> bool:
        return self.finish()

    def finish(self, error: Exception | None = None) -> bool:
        after, self._after = self._after, None
        self.paused = False
        if after is None:
            return False
        after(error)
        return True


class FakeProvider(StreamProvider):
    """Provider returning canned streams or failures, recording every location."""

    def __init__(self, name: str = "fake", *, fail: bool = False, delay: float = 0.0) -> None:
        self.name = name
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []
        self.streams: list[AudioStream] = []
        self.cancelled = 0

    async def attempt(self, url: str) -> AudioStream:
        self.calls.append(url)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        if self.fail:
            raise ResolutionFailure(self.name, url, "canned failure")
        stream = AudioStream(
            provider=self.name,
            location=url,
            container=StreamContainer.WEBM,
            pipe=io.BytesIO(b"\x1a\x45\xdf\xa3audio"),
        )
        self.streams.append(stream)
        return stream


class FakeCatalog(Catalog):
    """Catalog that maps Spotify tracks to a fixed YouTube surrogate."""

    def __init__(self, surrogate_url: str | None = None, search_results=None) -> None:
        self.surrogate_url = surrogate_url
        self.search_results = list(search_results or [])
        self.searches: list[tuple[str, SearchSource, int]] = []
        self.resolved: list[Track] = []

    async def search(self, query, source=SearchSource.AUTO, limit=20):
        self.searches.append((query, source, limit))
        return self.search_results[:limit]

    async def resolve_playable(self, track):
        self.resolved.append(track)
        if self.surrogate_url is None:
            raise CatalogError("no surrogate")
        return track.with_playback_url(self.surrogate_url)


def make_track(
    video_id: str = "dQw4w9WgXcQ", title: str = "Test Track", duration: int | None = 180
) -> Track:
    url = f"https://www.youtube.com/watch?v={video_id}"
    return Track(
        title=title,
        canonical_url=url,
        source=TrackSource.YOUTUBE,
        duration_seconds=duration,
        playback_url=url,
    )


def make_channel(channel_id: int = 555, guild_id: int = 987654321) -> SimpleNamespace:
    return SimpleNamespace(id=channel_id, guild=SimpleNamespace(id=guild_id))


async def drain(session) -> None:
    """Let deferred stream-end callbacks run and wait for the advance task."""
    for _ in range(3):
        await asyncio.sleep(0)
        await session.settle()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def sample_track():
    """Create a sample YouTube track for testing."""
    return make_track()


@pytest.fixture
def spotify_track():
    return Track(
        title="Song - Artist",
        canonical_url="https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC",
        source=TrackSource.SPOTIFY,
        duration_seconds=200,
        search_hint="Song - Artist",
    )


@pytest.fixture
def channel():
    return make_channel()
