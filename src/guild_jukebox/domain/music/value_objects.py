"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class TrackSource(Enum):
    """Catalog a track reference originates from."""

    YOUTUBE = "youtube"
    SPOTIFY = "spotify"

    @property
    def is_streamable(self) -> bool:
        """Whether audio can be pulled directly from this source's URLs."""
        return self is TrackSource.YOUTUBE


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - IDLE -> PLAYING (advance picked a track)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING -> IDLE (queue exhausted, stop)
    - PAUSED -> IDLE (stop)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.PLAYING},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.IDLE},
            PlaybackState.PAUSED: {PlaybackState.PLAYING, PlaybackState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}


class StreamContainer(Enum):
    """Container framing detected by sniffing the head of an audio byte stream.

    ``ffmpeg_format`` is the demuxer name handed to FFmpeg's ``-f`` input flag;
    ``None`` lets FFmpeg detect the format itself.
    """

    WEBM = "webm"
    OGG = "ogg"
    MP4 = "mp4"
    MPEG = "mpeg"
    UNKNOWN = "unknown"

    @property
    def ffmpeg_format(self) -> str | None:
        return _FFMPEG_FORMATS.get(self)

    @property
    def is_known(self) -> bool:
        return self is not StreamContainer.UNKNOWN


_FFMPEG_FORMATS: dict[StreamContainer, str] = {
    StreamContainer.WEBM: "matroska",
    StreamContainer.OGG: "ogg",
    StreamContainer.MP4: "mov",
    StreamContainer.MPEG: "mp3",
}
