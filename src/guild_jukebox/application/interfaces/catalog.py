"""Port interface for catalog search and playable-track resolution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from guild_jukebox.domain.shared.enums import SearchSource

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class Catalog(ABC):
    """Interface for looking up tracks in external catalogs."""

    @abstractmethod
    async def search(
        self, query: str, source: SearchSource = SearchSource.AUTO, limit: int = 20
    ) -> list["Track"]:
        """Search for tracks; results are ordered best match first."""
        ...

    @abstractmethod
    async def resolve_playable(self, track: "Track") -> "Track":
        """Return the track with ``playback_url`` set, or raise ``CatalogError``."""
        ...
