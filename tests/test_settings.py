"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for every settings group
- Loading nested settings from environment variables
- Custom validators (log level, snowflake IDs)
- Settings caching and clearing
"""

import pytest
from pydantic import SecretStr, ValidationError

from guild_jukebox.config.settings import (
    AudioSettings,
    DiscordSettings,
    PlaybackSettings,
    Settings,
    SpotifySettings,
    clear_settings_cache,
    get_settings,
)


class TestDiscordSettings:
    def test_defaults(self):
        discord = DiscordSettings()

        assert discord.token.get_secret_value() == ""
        assert discord.command_prefix == "!"
        assert discord.guild_ids == ()
        assert discord.sync_on_startup is False

    def test_guild_ids_list_becomes_tuple(self):
        discord = DiscordSettings(guild_ids=[123, 456])
        assert discord.guild_ids == (123, 456)

    @pytest.mark.parametrize("bad_id", [0, -5, 2**64])
    def test_invalid_snowflakes(self, bad_id):
        with pytest.raises(ValidationError):
            DiscordSettings(guild_ids=[bad_id])

    def test_token_aliases(self):
        discord = DiscordSettings(bot_token=SecretStr("abc"))
        assert discord.token.get_secret_value() == "abc"


class TestAudioSettings:
    def test_defaults(self):
        audio = AudioSettings()

        assert audio.ytdlp_path == "yt-dlp"
        assert audio.cookie_file is None
        assert audio.default_volume == 0.5
        assert audio.probe_bytes == 4096

    @pytest.mark.parametrize(
        "kwargs",
        [{"default_volume": 3.0}, {"probe_timeout_seconds": 0.0}, {"probe_bytes": 1}],
    )
    def test_out_of_range(self, kwargs):
        with pytest.raises(ValidationError):
            AudioSettings(**kwargs)


class TestPlaybackSettings:
    def test_defaults(self):
        playback = PlaybackSettings()

        assert playback.idle_timeout_seconds == 180.0
        assert playback.connect_timeout_seconds == 20.0

    def test_timeouts_must_be_positive(self):
        with pytest.raises(ValidationError):
            PlaybackSettings(idle_timeout_seconds=0.0)
        with pytest.raises(ValidationError):
            PlaybackSettings(connect_timeout_seconds=-1.0)


class TestSpotifySettings:
    def test_disabled_by_default(self):
        assert SpotifySettings().enabled is False

    def test_enabled_with_both_credentials(self):
        assert SpotifySettings(client_id="id", client_secret=SecretStr("s")).enabled
        assert not SpotifySettings(client_id="id").enabled


class TestSettings:
    def test_log_level_normalised(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("DISCORD__COMMAND_PREFIX", "?")
        monkeypatch.setenv("AUDIO__YTDLP_PATH", "/usr/local/bin/yt-dlp")
        monkeypatch.setenv("SPOTIFY__CLIENT_ID", "client")

        settings = Settings(_env_file=None)

        assert settings.discord.command_prefix == "?"
        assert settings.audio.ytdlp_path == "/usr/local/bin/yt-dlp"
        assert settings.spotify.client_id == "client"

    def test_get_settings_is_cached(self):
        clear_settings_cache()
        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()
