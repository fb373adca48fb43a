"""Per-guild voice playback engine for Discord."""

__version__ = "0.1.0"
