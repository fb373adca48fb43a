"""Tests for container detection from stream heads and declared codecs."""

import pytest

from guild_jukebox.domain.music.value_objects import StreamContainer
from guild_jukebox.infrastructure.audio.probe import (
    container_from_codec,
    container_from_mime,
    sniff_container,
)


class TestSniffContainer:
    @pytest.mark.parametrize(
        ("head", "expected"),
        [
            (b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81", StreamContainer.WEBM),
            (b"OggS\x00\x02\x00\x00", StreamContainer.OGG),
            (b"\x00\x00\x00\x18ftypdash", StreamContainer.MP4),
            (b"ID3\x04\x00\x00\x00\x00", StreamContainer.MPEG),
            (b"\xff\xfb\x90\x64\x00\x00\x00\x00", StreamContainer.MPEG),
            # ADTS AAC shares the sync word but not the layer bits.
            (b"\xff\xf1\x50\x80\x00\x1f\xfc\x00", StreamContainer.UNKNOWN),
            (b"<!DOCTYPE html>", StreamContainer.UNKNOWN),
            (b"", StreamContainer.UNKNOWN),
        ],
    )
    def test_sniff(self, head, expected):
        assert sniff_container(head) is expected

    def test_short_head_is_not_mp4(self):
        assert sniff_container(b"\x00\x00\x00\x18ftp") is StreamContainer.UNKNOWN


class TestDeclaredContainers:
    @pytest.mark.parametrize(
        ("ext", "acodec", "expected"),
        [
            ("webm", "opus", StreamContainer.WEBM),
            ("ogg", "vorbis", StreamContainer.OGG),
            ("opus", None, StreamContainer.OGG),
            ("m4a", "mp4a.40.2", StreamContainer.MP4),
            ("mp3", None, StreamContainer.MPEG),
            (None, None, StreamContainer.UNKNOWN),
            ("flv", "aac", StreamContainer.UNKNOWN),
        ],
    )
    def test_from_codec(self, ext, acodec, expected):
        assert container_from_codec(ext, acodec) is expected

    @pytest.mark.parametrize(
        ("mime", "expected"),
        [
            ('audio/webm; codecs="opus"', StreamContainer.WEBM),
            ('audio/mp4; codecs="mp4a.40.2"', StreamContainer.MP4),
            ("AUDIO/OGG", StreamContainer.OGG),
            ("video/mp4", StreamContainer.UNKNOWN),
            (None, StreamContainer.UNKNOWN),
        ],
    )
    def test_from_mime(self, mime, expected):
        assert container_from_mime(mime) is expected
