"""Port interface for strategies that turn a playable location into live audio."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import BinaryIO

from guild_jukebox.domain.music.value_objects import StreamContainer

logger = logging.getLogger(__name__)


@dataclass
class AudioStream:
    """A live audio byte stream ready to be handed to the voice transport.

    Exactly one of ``source_url`` (a direct media URL FFmpeg opens itself) or
    ``pipe`` (a readable byte stream fed to FFmpeg's stdin) is set. Whatever
    produced the bytes registers a closer so the stream owns its resources
    until ``close()`` is called.
    """

    provider: str
    location: str
    container: StreamContainer = StreamContainer.UNKNOWN
    source_url: str | None = None
    pipe: BinaryIO | None = None
    http_headers: dict[str, str] = field(default_factory=dict)
    _closers: list[Callable[[], None]] = field(default_factory=list, repr=False)
    _closed: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if (self.source_url is None) == (self.pipe is None):
            raise ValueError("AudioStream needs exactly one of source_url or pipe")

    @property
    def is_piped(self) -> bool:
        return self.pipe is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def add_closer(self, closer: Callable[[], None]) -> None:
        self._closers.append(closer)

    def close(self) -> None:
        """Release everything the stream owns. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        for closer in reversed(self._closers):
            try:
                closer()
            except Exception as e:
                logger.debug("Error closing %s stream: %r", self.provider, e)
        self._closers.clear()


class StreamProvider(ABC):
    """One interchangeable strategy in the provider chain."""

    name: str = "provider"

    @abstractmethod
    async def attempt(self, url: str) -> AudioStream:
        """Produce a live stream for ``url`` or raise ``ResolutionFailure``.

        Implementations must release anything they spawned before raising,
        including when cancelled.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
