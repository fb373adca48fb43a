"""Playback Engine - guild-keyed façade over the session registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from guild_jukebox.domain.music.entities import QueueSnapshot

if TYPE_CHECKING:
    from guild_jukebox.application.interfaces.voice_transport import VoiceChannelLike
    from guild_jukebox.application.services.session_registry import SessionRegistry
    from guild_jukebox.domain.music.entities import Track

logger = logging.getLogger(__name__)


class PlaybackEngine:
    """Routes user intents to the guild's session.

    Only ``play`` creates a session; every other intent on a guild without
    one is a no-op.
    """

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    async def play(self, channel: VoiceChannelLike, track: Track) -> Track:
        """Join ``channel`` (moving if needed) and queue ``track``.

        Raises:
            ConnectionTimeout: If the voice connection is not ready in time.
        """
        session = await self._registry.acquire(channel.guild.id)
        await session.join(channel)
        session.enqueue(track)
        return track

    def pause(self, guild_id: int) -> bool:
        session = self._registry.get(guild_id)
        return session.pause() if session else False

    def resume(self, guild_id: int) -> bool:
        session = self._registry.get(guild_id)
        return session.resume() if session else False

    async def skip(self, guild_id: int) -> Track | None:
        session = self._registry.get(guild_id)
        if session is None:
            return None
        return await session.skip()

    async def stop(self, guild_id: int) -> None:
        session = self._registry.get(guild_id)
        if session is not None:
            await session.stop()

    def clear(self, guild_id: int) -> int:
        session = self._registry.get(guild_id)
        return session.clear_upcoming() if session else 0

    def get_state(self, guild_id: int) -> QueueSnapshot:
        session = self._registry.get(guild_id)
        return session.snapshot() if session else QueueSnapshot()

    def is_connected(self, guild_id: int) -> bool:
        session = self._registry.get(guild_id)
        return session is not None and session.transport.is_connected()

    async def leave(self, guild_id: int) -> bool:
        """Tear down the guild's session and disconnect. Returns False if none existed."""
        session = self._registry.get(guild_id)
        if session is None:
            return False
        await session.destroy()
        return True

    async def shutdown(self) -> None:
        await self._registry.shutdown()
