"""URL recognition for the catalogs tracks come from."""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import parse_qs, urlparse

YOUTUBE_VIDEO_ID: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9_-]{11}$")

YOUTUBE_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/|youtube\.com/shorts/|youtube\.com/embed/)"
    r"([a-zA-Z0-9_-]{11})"
)

SPOTIFY_TRACK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"open\.spotify\.com/(?:intl-[a-z]+/)?track/([a-zA-Z0-9]+)"
)

_YOUTUBE_HOSTS: Final[frozenset[str]] = frozenset(
    {"youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com", "youtu.be"}
)


def extract_youtube_video_id(url: str) -> str | None:
    """Return the 11-character video id of a YouTube video URL, or None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    if host not in _YOUTUBE_HOSTS:
        return None

    if host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif parsed.path == "/watch":
        candidate = parse_qs(parsed.query).get("v", [""])[0]
    else:
        match = YOUTUBE_URL_PATTERN.search(url)
        candidate = match.group(1) if match else ""

    return candidate if YOUTUBE_VIDEO_ID.match(candidate) else None


def is_youtube_video_url(url: str) -> bool:
    """Whether ``url`` points directly at a single YouTube video."""
    return extract_youtube_video_id(url) is not None


def extract_spotify_track_id(url: str) -> str | None:
    """Return the track id of an ``open.spotify.com/track`` URL, or None."""
    match = SPOTIFY_TRACK_PATTERN.search(url)
    return match.group(1) if match else None


def youtube_watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
