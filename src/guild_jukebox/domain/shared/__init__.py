"""
Shared Domain Kernel

Contains types, messages and exceptions shared across the package.
"""

from guild_jukebox.domain.shared.exceptions import (
    CatalogError,
    ConnectionTimeout,
    DomainError,
    InvalidOperationError,
    NoPlayableLocation,
    ResolutionFailure,
    SessionDestroyedError,
)

__all__ = [
    "DomainError",
    "InvalidOperationError",
    "SessionDestroyedError",
    "ConnectionTimeout",
    "ResolutionFailure",
    "NoPlayableLocation",
    "CatalogError",
]
