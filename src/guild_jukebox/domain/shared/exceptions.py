"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class SessionDestroyedError(InvalidOperationError):
    """Raised when an operation targets a session that has already been torn down."""

    def __init__(self, guild_id: int, operation: str) -> None:
        super().__init__(
            operation=operation,
            current_state="destroyed",
            message=f"Session for guild {guild_id} is destroyed; cannot {operation}",
        )
        self.code = "SESSION_DESTROYED"
        self.guild_id = guild_id


class ConnectionTimeout(DomainError):
    """Raised when the voice transport does not become ready in time."""

    def __init__(self, channel_id: int, timeout: float, message: str | None = None) -> None:
        msg = message or f"Voice connection to channel {channel_id} not ready after {timeout:g}s"
        super().__init__(msg, code="CONNECTION_TIMEOUT")
        self.channel_id = channel_id
        self.timeout = timeout


class ResolutionFailure(DomainError):
    """Raised when a single stream provider cannot produce audio for a location."""

    def __init__(self, provider: str, url: str, reason: str) -> None:
        super().__init__(f"{provider} failed for {url}: {reason}", code="RESOLUTION_FAILURE")
        self.provider = provider
        self.url = url
        self.reason = reason


class NoPlayableLocation(DomainError):
    """Raised when every provider (or location recovery) failed for a track."""

    def __init__(self, title: str, reason: str, failures: list[ResolutionFailure] | None = None) -> None:
        super().__init__(f"No playable stream for '{title}': {reason}", code="NO_PLAYABLE_LOCATION")
        self.title = title
        self.reason = reason
        self.failures = list(failures or [])


class CatalogError(DomainError):
    """Raised when the catalog cannot look up or map a track."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CATALOG_ERROR")
