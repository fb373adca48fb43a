"""
Music Bounded Context

Domain objects for tracks, queue snapshots and playback state.
"""

from guild_jukebox.domain.music.entities import QueueSnapshot, Track
from guild_jukebox.domain.music.value_objects import PlaybackState, StreamContainer, TrackSource

__all__ = [
    # Entities
    "Track",
    "QueueSnapshot",
    # Value Objects
    "TrackSource",
    "PlaybackState",
    "StreamContainer",
]
