"""Port interface for one guild's real-time voice connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .stream_provider import AudioStream


class GuildLike(Protocol):
    id: int


class VoiceChannelLike(Protocol):
    """Anything with a channel id (and owning guild) the transport can connect to."""

    id: int
    guild: GuildLike


StreamEndCallback = Callable[[Exception | None], None]


class VoiceTransport(ABC):
    """Voice connection owned by exactly one session.

    Contract: for every successful ``play`` call the ``after`` callback is
    invoked exactly once, on the event loop, when the stream finishes, fails
    or is stopped.
    """

    @property
    @abstractmethod
    def channel_id(self) -> int | None:
        """Current voice channel ID, or None if not connected."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def connect(self, channel: VoiceChannelLike) -> None:
        """Connect to a voice channel and wait until the connection is ready."""
        ...

    @abstractmethod
    async def move_to(self, channel: VoiceChannelLike) -> None:
        """Redirect an existing connection to a different channel."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the connection. No-op when not connected."""
        ...

    @abstractmethod
    def play(self, stream: AudioStream, after: StreamEndCallback) -> None:
        """Start streaming; raises if the stream cannot be started."""
        ...

    @abstractmethod
    def pause(self) -> bool:
        ...

    @abstractmethod
    def resume(self) -> bool:
        ...

    @abstractmethod
    def stop(self) -> bool:
        """Stop the active stream. Returns True if one was playing or paused."""
        ...


TransportFactory = Callable[[int], VoiceTransport]
"""Builds the transport for a guild ID; called once per session."""
