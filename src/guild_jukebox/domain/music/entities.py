"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from guild_jukebox.domain.music.value_objects import PlaybackState, TrackSource
from guild_jukebox.domain.shared.exceptions import InvalidOperationError
from guild_jukebox.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    TrackTitleStr,
)


class Track(BaseModel):
    """Immutable value object referencing playable content.

    ``canonical_url`` identifies the content in its source catalog.
    ``playback_url`` is a directly streamable location; once set it is
    authoritative and is never replaced.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    canonical_url: HttpUrlStr
    source: TrackSource = TrackSource.YOUTUBE
    duration_seconds: DurationSeconds | None = None
    search_hint: NonEmptyStr | None = None
    playback_url: HttpUrlStr | None = None
    requested_by: NonEmptyStr | None = None

    @property
    def location(self) -> str:
        """Where playback should start from: the resolved URL if any, else the canonical one."""
        return self.playback_url or self.canonical_url

    @property
    def lookup_query(self) -> str:
        """Free-text query used to find a streamable surrogate for this track."""
        return self.search_hint or self.title

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.duration_seconds is None:
            return "Unknown"

        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    @property
    def display_title(self) -> str:
        """Get display title with duration if available."""
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title

    def with_playback_url(self, url: str) -> Track:
        """Return a copy carrying the resolved playback location.

        The playback location is write-once: re-setting the same value is a
        no-op, setting a different one is rejected.
        """
        if self.playback_url is not None:
            if self.playback_url == url:
                return self
            raise InvalidOperationError(
                operation="set playback_url",
                current_state="resolved",
                message=f"Track '{self.title}' already has a playback URL",
            )
        return Track.model_validate({**self.model_dump(), "playback_url": url})

    def with_requester(self, requested_by: str) -> Track:
        """Return a copy of this track with requester attribution populated."""
        return self.model_copy(update={"requested_by": requested_by})


class QueueSnapshot(BaseModel):
    """Read-only view of a session's queue at one point in time."""

    model_config = ConfigDict(frozen=True)

    current: Track | None = None
    upcoming: tuple[Track, ...] = ()
    state: PlaybackState = PlaybackState.IDLE
    skipped: NonNegativeInt = 0

    @property
    def is_empty(self) -> bool:
        return self.current is None and not self.upcoming
