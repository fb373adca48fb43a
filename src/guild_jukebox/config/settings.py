"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import TimeoutSeconds, VolumeFloat


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("guild_ids", "guilds")
    )
    sync_on_startup: bool = False

    @field_validator("guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            if snowflake <= 0:
                raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
            if snowflake >= 2**64:
                raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
        return v


class AudioSettings(BaseModel):
    """Audio extraction and FFmpeg configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    default_volume: VolumeFloat = 0.5
    ffmpeg_before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    ffmpeg_options: str = "-vn"
    ytdlp_path: str = Field(
        default="yt-dlp", validation_alias=AliasChoices("ytdlp_path", "youtube_dl_path")
    )
    ytdlp_format: str = "bestaudio[ext=webm][acodec=opus]/bestaudio/best"
    secondary_format: str = "bestaudio[ext=m4a]/140/bestaudio/best"
    cookie_file: str | None = Field(
        default=None,
        validation_alias=AliasChoices("cookie_file", "youtube_cookie_file"),
    )
    probe_grace_seconds: float = Field(default=0.5, ge=0.0, le=10.0)
    probe_timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)
    probe_bytes: int = Field(default=4096, ge=64, le=1024 * 1024)


class PlaybackSettings(BaseModel):
    """Session lifecycle timing."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    idle_timeout_seconds: float = Field(default=180.0, gt=0.0)
    connect_timeout_seconds: TimeoutSeconds = 20.0


class SpotifySettings(BaseModel):
    """Spotify catalog credentials. Spotify lookups are disabled when unset."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    client_id: str = ""
    client_secret: SecretStr = SecretStr("")

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret.get_secret_value())


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__GUILD_IDS, etc. (nested with ``__``)
    - AUDIO__YTDLP_PATH, AUDIO__COOKIE_FILE, ...
    - PLAYBACK__IDLE_TIMEOUT_SECONDS, PLAYBACK__CONNECT_TIMEOUT_SECONDS
    - SPOTIFY__CLIENT_ID, SPOTIFY__CLIENT_SECRET
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
