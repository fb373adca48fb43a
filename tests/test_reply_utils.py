"""Tests for chat reply formatting helpers."""

import pytest

from guild_jukebox.utils.reply import format_duration, truncate


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(None, "--:--"), (0, "0:00"), (59, "0:59"), (61.9, "1:01"), (3600, "1:00:00"), (7322, "2:02:02")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_truncate_short_text_untouched():
    assert truncate("short", 10) == "short"


def test_truncate_long_text():
    result = truncate("x" * 20, 10)

    assert len(result) == 10
    assert result.endswith("…")
