"""Shared string enumerations for type-safe comparisons across layers."""

from __future__ import annotations

from enum import StrEnum


class SearchSource(StrEnum):
    """Catalog filter for searches."""

    AUTO = "auto"
    YOUTUBE = "youtube"
    SPOTIFY = "spotify"
