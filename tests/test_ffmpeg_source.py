"""Tests for FFmpeg option building and audio source creation."""

import io
from unittest.mock import patch

import pytest

from guild_jukebox.application.interfaces.stream_provider import AudioStream
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.music.value_objects import StreamContainer
from guild_jukebox.infrastructure.audio.ffmpeg_source import (
    FFmpegConfig,
    create_audio_source,
)


def url_stream(**kwargs) -> AudioStream:
    return AudioStream(
        provider="test",
        location="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        source_url="https://media.example/audio",
        **kwargs,
    )


def pipe_stream(container=StreamContainer.WEBM) -> AudioStream:
    return AudioStream(
        provider="test",
        location="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        container=container,
        pipe=io.BytesIO(b"data"),
    )


class TestAudioStream:
    def test_requires_exactly_one_input(self):
        with pytest.raises(ValueError):
            AudioStream(provider="p", location="l")
        with pytest.raises(ValueError):
            AudioStream(provider="p", location="l", source_url="u", pipe=io.BytesIO())

    def test_close_runs_closers_once_in_reverse(self):
        calls = []
        stream = pipe_stream()
        stream.add_closer(lambda: calls.append("first"))
        stream.add_closer(lambda: calls.append("second"))

        stream.close()
        stream.close()

        assert calls == ["second", "first"]
        assert stream.closed

    def test_failing_closer_does_not_stop_others(self):
        calls = []
        stream = pipe_stream()
        stream.add_closer(lambda: calls.append("ran"))
        stream.add_closer(lambda: 1 / 0)

        stream.close()

        assert calls == ["ran"]


class TestFFmpegConfig:
    def test_from_settings(self):
        settings = AudioSettings(default_volume=1.0, ffmpeg_options="-vn -sn")
        config = FFmpegConfig.from_settings(settings)

        assert config.default_volume == 1.0
        assert config.options == "-vn -sn"
        assert config.network_before_options == settings.ffmpeg_before_options

    def test_pipe_gets_format_only(self):
        opts = FFmpegConfig().get_before_options(pipe_stream(StreamContainer.OGG))

        assert opts == "-f ogg"

    def test_pipe_with_unknown_container_lets_ffmpeg_detect(self):
        opts = FFmpegConfig().get_before_options(pipe_stream(StreamContainer.UNKNOWN))

        assert opts == ""

    def test_url_gets_reconnect_and_headers(self):
        stream = url_stream(container=StreamContainer.MP4, http_headers={"Cookie": "a=b"})
        opts = FFmpegConfig().get_before_options(stream)

        assert opts.startswith("-f mov -reconnect 1")
        assert "-headers" in opts
        assert "Cookie: a=b" in opts
        assert "User-Agent:" in opts

    def test_stream_headers_override_defaults(self):
        stream = url_stream(http_headers={"User-Agent": "custom"})
        opts = FFmpegConfig().get_before_options(stream)

        assert "User-Agent: custom" in opts
        assert "com.google.android.youtube" not in opts


class TestCreateAudioSource:
    def test_piped_stream(self):
        stream = pipe_stream()
        with patch("guild_jukebox.infrastructure.audio.ffmpeg_source.discord") as mock_discord:
            create_audio_source(stream, FFmpegConfig(), volume=0.8)

        args, kwargs = mock_discord.FFmpegPCMAudio.call_args
        assert args[0] is stream.pipe
        assert kwargs["pipe"] is True
        assert kwargs["before_options"] == "-f matroska"
        mock_discord.PCMVolumeTransformer.assert_called_once_with(
            mock_discord.FFmpegPCMAudio.return_value, volume=0.8
        )

    def test_url_stream_uses_default_volume(self):
        stream = url_stream()
        config = FFmpegConfig(default_volume=0.3)
        with patch("guild_jukebox.infrastructure.audio.ffmpeg_source.discord") as mock_discord:
            create_audio_source(stream, config)

        args, kwargs = mock_discord.FFmpegPCMAudio.call_args
        assert args[0] == "https://media.example/audio"
        assert "pipe" not in kwargs
        assert mock_discord.PCMVolumeTransformer.call_args.kwargs["volume"] == 0.3

    def test_closed_stream_rejected(self):
        stream = pipe_stream()
        stream.close()

        with pytest.raises(ValueError):
            create_audio_source(stream, FFmpegConfig())
