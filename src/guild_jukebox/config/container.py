"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for catalogs, stream providers, the provider chain,
the session registry and the playback engine. Components are created on
demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.catalog import Catalog
    from ..application.interfaces.stream_provider import StreamProvider
    from ..application.interfaces.voice_transport import TransportFactory
    from ..application.services.playback_engine import PlaybackEngine
    from ..application.services.provider_chain import ProviderChain
    from ..application.services.session_registry import SessionRegistry
    from ..infrastructure.audio.ffmpeg_source import FFmpegConfig
    from ..infrastructure.audio.providers.innertube import InnertubeProvider
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _catalog: Catalog | None = None
    _ffmpeg_config: FFmpegConfig | None = None
    _providers: list[StreamProvider] | None = None
    _innertube: InnertubeProvider | None = None
    _transport_factory: TransportFactory | None = None

    # Application services
    _provider_chain: ProviderChain | None = None
    _session_registry: SessionRegistry | None = None
    _playback_engine: PlaybackEngine | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def catalog(self) -> Catalog:
        """Get the catalog service (YouTube plus Spotify when configured)."""
        if self._catalog is None:
            from ..infrastructure.catalog.service import CatalogService
            from ..infrastructure.catalog.spotify import SpotifyCatalog
            from ..infrastructure.catalog.youtube import YouTubeCatalog

            spotify = SpotifyCatalog(self.settings.spotify)
            self._catalog = CatalogService(
                YouTubeCatalog(self.settings.audio),
                spotify if spotify.enabled else None,
            )
        return self._catalog

    @property
    def ffmpeg_config(self) -> FFmpegConfig:
        if self._ffmpeg_config is None:
            from ..infrastructure.audio.ffmpeg_source import FFmpegConfig

            self._ffmpeg_config = FFmpegConfig.from_settings(self.settings.audio)
        return self._ffmpeg_config

    @property
    def stream_providers(self) -> list[StreamProvider]:
        """Get the stream providers in fallback order."""
        if self._providers is None:
            from ..infrastructure.audio.providers import (
                InnertubeProvider,
                YtDlpLibraryProvider,
                YtDlpProcessProvider,
            )

            audio = self.settings.audio
            self._innertube = InnertubeProvider(audio)
            self._providers = [
                YtDlpProcessProvider(audio),
                YtDlpLibraryProvider.primary(audio),
                YtDlpLibraryProvider.secondary(audio),
                self._innertube,
            ]
        return self._providers

    @property
    def transport_factory(self) -> TransportFactory:
        """Get the per-guild voice transport factory."""
        if self._transport_factory is None:
            from ..infrastructure.discord.voice_transport import discord_transport_factory

            self._transport_factory = discord_transport_factory(self.bot, self.ffmpeg_config)
        return self._transport_factory

    # === Application Services ===

    @property
    def provider_chain(self) -> ProviderChain:
        if self._provider_chain is None:
            from ..application.services.provider_chain import ProviderChain

            self._provider_chain = ProviderChain(self.stream_providers, self.catalog)
        return self._provider_chain

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            playback = self.settings.playback
            self._session_registry = SessionRegistry(
                transport_factory=self.transport_factory,
                chain=self.provider_chain,
                idle_timeout=playback.idle_timeout_seconds,
                connect_timeout=playback.connect_timeout_seconds,
            )
        return self._session_registry

    @property
    def playback_engine(self) -> PlaybackEngine:
        if self._playback_engine is None:
            from ..application.services.playback_engine import PlaybackEngine

            self._playback_engine = PlaybackEngine(self.session_registry)
        return self._playback_engine

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._playback_engine is not None:
            try:
                await self._playback_engine.shutdown()
            except Exception as exc:
                logger.warning("Failed shutting down playback sessions: %r", exc)

        if self._innertube is not None:
            await self._innertube.aclose()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
