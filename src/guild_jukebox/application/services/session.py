"""Per-guild playback session.

A ``GuildSession`` owns one guild's queue, its voice transport and its idle
timer. All state changes happen on the event loop; the only work that runs
concurrently with user intents is the single in-flight ``advance`` task that
pops the next track and hands it to the provider chain.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import TYPE_CHECKING

from guild_jukebox.application.services.idle_timer import IdleTimer
from guild_jukebox.domain.music.entities import QueueSnapshot, Track
from guild_jukebox.domain.music.value_objects import PlaybackState
from guild_jukebox.domain.shared.exceptions import (
    ConnectionTimeout,
    NoPlayableLocation,
    SessionDestroyedError,
)
from guild_jukebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from guild_jukebox.application.interfaces.stream_provider import AudioStream
    from guild_jukebox.application.interfaces.voice_transport import (
        VoiceChannelLike,
        VoiceTransport,
    )
    from guild_jukebox.application.services.provider_chain import ProviderChain

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT = 180.0
DEFAULT_CONNECT_TIMEOUT = 20.0


class GuildSession:
    """Queue, playback state and voice connection for one guild."""

    def __init__(
        self,
        guild_id: int,
        *,
        transport: VoiceTransport,
        chain: ProviderChain,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        on_destroy: Callable[[GuildSession], None] | None = None,
    ) -> None:
        self._guild_id = guild_id
        self._transport = transport
        self._chain = chain
        self._connect_timeout = connect_timeout
        self._on_destroy = on_destroy

        self._queue: deque[Track] = deque()
        self._current: Track | None = None
        self._state = PlaybackState.IDLE
        self._skipped_count = 0

        self._advance_task: asyncio.Task[None] | None = None
        # Bumped whenever a stream is started or abandoned; end signals
        # carrying an older value are ignored.
        self._generation = 0
        self._destroyed = False
        self._closed = asyncio.Event()
        self._join_lock = asyncio.Lock()
        self._idle_timer = IdleTimer(
            idle_timeout, self._on_idle_timeout, name=f"idle-timer-{guild_id}"
        )

    # ─────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────

    @property
    def guild_id(self) -> int:
        return self._guild_id

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_track(self) -> Track | None:
        return self._current

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def skipped_count(self) -> int:
        """Number of tracks dropped because no provider could play them."""
        return self._skipped_count

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def idle_timer_armed(self) -> bool:
        return self._idle_timer.armed

    @property
    def transport(self) -> VoiceTransport:
        return self._transport

    @property
    def _advancing(self) -> bool:
        return self._advance_task is not None and not self._advance_task.done()

    @property
    def _is_inactive(self) -> bool:
        return self._current is None and not self._queue and not self._advancing

    # ─────────────────────────────────────────────────────────────────
    # Connection
    # ─────────────────────────────────────────────────────────────────

    async def join(self, channel: VoiceChannelLike) -> None:
        """Connect to ``channel``, moving the existing connection if needed.

        Raises:
            ConnectionTimeout: If the transport is not ready within the
                connect timeout.
            SessionDestroyedError: If the session has been torn down.
        """
        self._ensure_alive("join")
        self._idle_timer.disarm()

        async with self._join_lock:
            transport = self._transport
            if transport.is_connected() and transport.channel_id == channel.id:
                logger.debug(LogTemplates.VOICE_ALREADY_IN_CHANNEL, channel.id, self._guild_id)
                return

            try:
                async with asyncio.timeout(self._connect_timeout):
                    if transport.is_connected():
                        await transport.move_to(channel)
                        logger.info(LogTemplates.VOICE_MOVED, channel.id, self._guild_id)
                    else:
                        await transport.connect(channel)
                        logger.info(LogTemplates.VOICE_CONNECTED, channel.id, self._guild_id)
            except TimeoutError as e:
                logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel.id, self._guild_id)
                self._rearm_if_inactive()
                raise ConnectionTimeout(channel.id, self._connect_timeout) from e
            except Exception:
                self._rearm_if_inactive()
                raise

    # ─────────────────────────────────────────────────────────────────
    # Queue
    # ─────────────────────────────────────────────────────────────────

    def enqueue(self, track: Track) -> int:
        """Append ``track`` and start playback if the session is idle.

        Returns:
            The track's 1-based position in the upcoming queue.
        """
        self._ensure_alive("enqueue")
        self._queue.append(track)
        self._idle_timer.disarm()

        position = len(self._queue)
        logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, self._guild_id)

        if self._state is PlaybackState.IDLE:
            self._trigger_advance()
        return position

    def clear_upcoming(self) -> int:
        """Drop every upcoming track; the current one keeps playing."""
        if self._destroyed:
            return 0
        count = len(self._queue)
        self._queue.clear()
        logger.info(LogTemplates.QUEUE_CLEARED, count, self._guild_id)
        return count

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            current=self._current,
            upcoming=tuple(self._queue),
            state=self._state,
            skipped=self._skipped_count,
        )

    # ─────────────────────────────────────────────────────────────────
    # Playback control
    # ─────────────────────────────────────────────────────────────────

    def pause(self) -> bool:
        if self._destroyed or self._state is not PlaybackState.PLAYING:
            return False
        if not self._transport.pause():
            return False
        self._state = PlaybackState.PAUSED
        logger.info(LogTemplates.PLAYBACK_PAUSED, self._guild_id)
        return True

    def resume(self) -> bool:
        if self._destroyed or self._state is not PlaybackState.PAUSED:
            return False
        if not self._transport.resume():
            return False
        self._state = PlaybackState.PLAYING
        logger.info(LogTemplates.PLAYBACK_RESUMED, self._guild_id)
        return True

    async def skip(self) -> Track | None:
        """End the current track and move to the next one.

        Returns:
            The skipped track, or None if nothing was current.
        """
        if self._destroyed or self._current is None:
            return None

        skipped = self._current
        if self._advancing:
            # Still resolving: abandon the attempt and move on directly.
            await self._cancel_advance()
            logger.info(LogTemplates.RESOLUTION_CANCELLED, skipped.title, self._guild_id)
            self._current = None
            self._state = PlaybackState.IDLE
            self._trigger_advance()
        elif not self._transport.stop():
            # Nothing was actually streaming; advance ourselves.
            self._generation += 1
            self._current = None
            self._state = PlaybackState.IDLE
            self._trigger_advance()

        logger.info(LogTemplates.TRACK_SKIPPED, skipped.title, self._guild_id)
        return skipped

    async def stop(self) -> None:
        """Clear the queue, stop the current stream and go idle."""
        if self._destroyed:
            return

        self._queue.clear()
        self._current = None
        self._state = PlaybackState.IDLE
        self._generation += 1
        self._transport.stop()
        await self._cancel_advance()
        logger.info(LogTemplates.PLAYBACK_STOPPED, self._guild_id)

        # Tracks enqueued while the cancellation was pending still play.
        if self._queue:
            self._trigger_advance()
        else:
            self._arm_idle_timer()

    async def destroy(self) -> None:
        """Tear the session down. Idempotent."""
        if self._destroyed:
            return
        self._destroyed = True

        try:
            self._idle_timer.disarm()
            await self._cancel_advance()
            self._generation += 1
            self._queue.clear()
            self._current = None
            self._state = PlaybackState.IDLE

            try:
                self._transport.stop()
                await self._transport.disconnect()
            except Exception as e:
                logger.warning(LogTemplates.VOICE_CLEANUP_ERROR, self._guild_id, e)

            logger.info(LogTemplates.SESSION_DESTROYED, self._guild_id)
        finally:
            callback, self._on_destroy = self._on_destroy, None
            if callback is not None:
                callback(self)
            self._closed.set()

    async def wait_closed(self) -> None:
        """Wait until a destroy in progress has released the transport."""
        await self._closed.wait()

    async def settle(self) -> None:
        """Wait until no advance is in flight."""
        while self._advancing:
            assert self._advance_task is not None
            await asyncio.wait({self._advance_task})

    # ─────────────────────────────────────────────────────────────────
    # Advancing
    # ─────────────────────────────────────────────────────────────────

    def _trigger_advance(self) -> None:
        if self._destroyed or self._advancing:
            return
        task = asyncio.get_running_loop().create_task(
            self._advance(), name=f"advance-{self._guild_id}"
        )
        task.add_done_callback(self._on_advance_done)
        self._advance_task = task

    async def _advance(self) -> None:
        """Pop tracks until one starts streaming or the queue runs dry."""
        while not self._destroyed:
            if not self._queue:
                self._current = None
                self._state = PlaybackState.IDLE
                logger.info(LogTemplates.QUEUE_EMPTY, self._guild_id)
                self._arm_idle_timer()
                return

            track = self._queue.popleft()
            self._current = track
            self._state = PlaybackState.PLAYING
            self._idle_timer.disarm()

            try:
                result = await self._chain.open(track)
            except NoPlayableLocation as e:
                self._drop(track, e.reason)
                continue
            except Exception as e:
                logger.exception(LogTemplates.PLAYBACK_FAILED_START, track.title, self._guild_id)
                self._drop(track, repr(e))
                continue

            self._current = result.track
            if self._start_stream(result.track, result.stream):
                return
            self._drop(track, "transport refused the stream")

    def _start_stream(self, track: Track, stream: AudioStream) -> bool:
        self._generation += 1
        generation = self._generation
        try:
            self._transport.play(
                stream, after=lambda error: self._on_stream_end(generation, error)
            )
        except Exception:
            logger.exception(LogTemplates.PLAYBACK_FAILED_START, track.title, self._guild_id)
            stream.close()
            return False

        logger.info(
            LogTemplates.PLAYBACK_STARTED, track.display_title, stream.provider, self._guild_id
        )
        return True

    def _drop(self, track: Track, reason: str) -> None:
        self._skipped_count += 1
        logger.warning(LogTemplates.TRACK_DROPPED, track.title, self._guild_id, reason)

    def _on_stream_end(self, generation: int, error: Exception | None) -> None:
        # Deferred so a transport that reports the end from inside play()
        # does not find the advance task still running.
        asyncio.get_running_loop().call_soon(self._handle_stream_end, generation, error)

    def _handle_stream_end(self, generation: int, error: Exception | None) -> None:
        if error is not None:
            logger.warning(LogTemplates.PLAYBACK_ERROR, self._guild_id, error)

        if self._destroyed or generation != self._generation:
            logger.debug(LogTemplates.STREAM_END_STALE, self._guild_id)
            return

        logger.debug(LogTemplates.STREAM_ENDED, self._guild_id, error)
        self._generation += 1
        self._trigger_advance()

    def _on_advance_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Advance task failed in guild %s", self._guild_id, exc_info=exc)

    async def _cancel_advance(self) -> None:
        task = self._advance_task
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        await asyncio.wait({task})

    # ─────────────────────────────────────────────────────────────────
    # Idle handling
    # ─────────────────────────────────────────────────────────────────

    def _arm_idle_timer(self) -> None:
        if self._destroyed:
            return
        self._idle_timer.arm()
        logger.debug(LogTemplates.IDLE_TIMER_ARMED, self._guild_id, self._idle_timer.delay)

    def _rearm_if_inactive(self) -> None:
        if self._is_inactive:
            self._arm_idle_timer()

    async def _on_idle_timeout(self) -> None:
        logger.info(LogTemplates.IDLE_TIMER_FIRED, self._guild_id)
        await self.destroy()

    def _ensure_alive(self, operation: str) -> None:
        if self._destroyed:
            raise SessionDestroyedError(self._guild_id, operation)

    def __repr__(self) -> str:
        return (
            f"<GuildSession guild={self._guild_id} state={self._state.value} "
            f"queued={len(self._queue)}>"
        )
