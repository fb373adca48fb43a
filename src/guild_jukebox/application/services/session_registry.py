"""Guild ID to session map.

At most one live session exists per guild. Sessions remove themselves from
the registry when they are destroyed, whether by an idle timeout, an explicit
leave or application shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING

from guild_jukebox.application.services.session import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_IDLE_TIMEOUT,
    GuildSession,
)
from guild_jukebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from guild_jukebox.application.interfaces.voice_transport import TransportFactory
    from guild_jukebox.application.services.provider_chain import ProviderChain

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates, looks up and evicts guild sessions."""

    def __init__(
        self,
        *,
        transport_factory: TransportFactory,
        chain: ProviderChain,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        self._transport_factory = transport_factory
        self._chain = chain
        self._idle_timeout = idle_timeout
        self._connect_timeout = connect_timeout
        self._sessions: dict[int, GuildSession] = {}
        self._lock = threading.Lock()

    def get(self, guild_id: int) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def get_or_create(self, guild_id: int) -> GuildSession:
        """Return the guild's live session, creating it if there is none."""
        with self._lock:
            session = self._sessions.get(guild_id)
            if session is not None and not session.is_destroyed:
                return session

            session = GuildSession(
                guild_id,
                transport=self._transport_factory(guild_id),
                chain=self._chain,
                idle_timeout=self._idle_timeout,
                connect_timeout=self._connect_timeout,
                on_destroy=self.remove,
            )
            self._sessions[guild_id] = session

        logger.info(LogTemplates.SESSION_CREATED, guild_id)
        return session

    async def acquire(self, guild_id: int) -> GuildSession:
        """Like :meth:`get_or_create`, but first waits for a session that is
        still tearing down to release its voice connection.
        """
        while True:
            session = self._sessions.get(guild_id)
            if session is None or not session.is_destroyed:
                return self.get_or_create(guild_id)
            await session.wait_closed()

    def remove(self, session: GuildSession) -> bool:
        """Evict ``session`` if it is still the registered one for its guild."""
        with self._lock:
            if self._sessions.get(session.guild_id) is not session:
                logger.debug(LogTemplates.SESSION_EVICT_MISMATCH, session.guild_id)
                return False
            del self._sessions[session.guild_id]
            remaining = len(self._sessions)

        logger.info(LogTemplates.SESSION_REMOVED, session.guild_id, remaining)
        return True

    def guild_ids(self) -> list[int]:
        with self._lock:
            return list(self._sessions)

    async def shutdown(self) -> None:
        """Destroy every live session."""
        with self._lock:
            sessions = list(self._sessions.values())

        if not sessions:
            return

        logger.info(LogTemplates.SESSION_SHUTDOWN, len(sessions))
        await asyncio.gather(*(session.destroy() for session in sessions), return_exceptions=True)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions
