"""
Unit Tests for the DI container and entry point

Tests for:
- Lazy creation and caching of container components
- Bot access before it is set
- Shutdown of owned resources
- Logging setup fallback and the missing-token exit path
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import SecretStr

from guild_jukebox.application.services.playback_engine import PlaybackEngine
from guild_jukebox.application.services.provider_chain import ProviderChain
from guild_jukebox.config.container import Container, create_container
from guild_jukebox.config.settings import DiscordSettings, Settings
from guild_jukebox.infrastructure.catalog.service import CatalogService
from guild_jukebox.main import main, setup_logging


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def container(settings):
    return create_container(settings)


class TestContainer:
    def test_bot_not_set(self, container):
        with pytest.raises(RuntimeError):
            _ = container.bot

    def test_set_bot(self, container):
        bot = MagicMock()
        container.set_bot(bot)
        assert container.bot is bot

    def test_catalog_is_cached(self, container):
        catalog = container.catalog

        assert isinstance(catalog, CatalogService)
        assert container.catalog is catalog
        assert catalog._spotify is None

    def test_provider_order(self, container):
        names = [p.name for p in container.stream_providers]

        assert names == ["yt-dlp-process", "yt-dlp-library", "yt-dlp-library-alt", "innertube"]

    def test_services_wired(self, container):
        container.set_bot(MagicMock())

        engine = container.playback_engine

        assert isinstance(engine, PlaybackEngine)
        assert container.playback_engine is engine
        assert isinstance(container.provider_chain, ProviderChain)
        assert container.session_registry is container.session_registry

    def test_transport_factory_requires_bot(self, container):
        with pytest.raises(RuntimeError):
            _ = container.transport_factory

    def test_ffmpeg_config_from_settings(self, container, settings):
        assert container.ffmpeg_config.default_volume == settings.audio.default_volume

    async def test_shutdown_closes_resources(self, settings):
        container = Container(settings)
        container._playback_engine = MagicMock(shutdown=AsyncMock())
        container._innertube = MagicMock(aclose=AsyncMock())

        await container.shutdown()

        container._playback_engine.shutdown.assert_awaited_once()
        container._innertube.aclose.assert_awaited_once()

    async def test_shutdown_tolerates_engine_errors(self, settings):
        container = Container(settings)
        container._playback_engine = MagicMock(shutdown=AsyncMock(side_effect=RuntimeError("x")))

        await container.shutdown()

    async def test_shutdown_with_nothing_created(self, container):
        await container.shutdown()


class TestMain:
    def test_setup_logging_falls_back(self, tmp_path):
        root = logging.getLogger()
        original_level = root.level
        try:
            setup_logging("debug", tmp_path / "missing.json")
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(original_level)

    def test_missing_token_exits_with_error(self):
        settings = Settings(_env_file=None, discord=DiscordSettings(token=SecretStr("")))

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=settings),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot") as create_bot,
        ):
            assert main() == 1

        create_bot.assert_not_called()

    def test_runs_bot_with_token(self):
        settings = Settings(_env_file=None, discord=DiscordSettings(token=SecretStr("abc")))

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=settings),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot") as create_bot,
        ):
            assert main() == 0

        create_bot.return_value.run_with_graceful_shutdown.assert_called_once_with("abc")

    def test_fatal_error_returns_one(self):
        settings = Settings(_env_file=None, discord=DiscordSettings(token=SecretStr("abc")))

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=settings),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot") as create_bot,
        ):
            create_bot.return_value.run_with_graceful_shutdown.side_effect = RuntimeError("boom")
            assert main() == 1
