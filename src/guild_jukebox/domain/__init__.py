# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Cross-cutting types, messages and exceptions
- music/: Track, queue snapshot and playback state
"""

from guild_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
