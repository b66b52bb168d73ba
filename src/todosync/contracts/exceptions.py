"""Exception hierarchy for todosync.

All todosync exceptions inherit from :class:`TodoSyncError`, so callers can
catch any library error with a single ``except`` clause while still handling
specific failure modes.
"""

from __future__ import annotations


class TodoSyncError(Exception):
    """Base exception for all todosync errors."""


class ConfigError(TodoSyncError):
    """Configuration loading or validation failure."""


class ConfigurationMissing(ConfigError):
    """Store identity or auth token is missing; the pass cannot start."""


class ProviderError(TodoSyncError):
    """Base remote store operation failure."""


class RemoteUnavailable(ProviderError):
    """The remote store could not be reached or refused the request."""


class AuthenticationError(RemoteUnavailable):
    """Authentication/authorization failure."""


class RecordNotFoundError(RemoteUnavailable):
    """The store or one of its records does not exist (or is not shared)."""


class MalformedRemoteField(ProviderError):
    """A remote record carried a field with an unexpected shape."""

    def __init__(self, message: str, *, field: str, record_key: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.record_key = record_key


class BufferWriteRejected(TodoSyncError):
    """A local buffer edit could not be applied."""

    def __init__(self, message: str, *, buffer_key: str, line: int | None = None) -> None:
        super().__init__(message)
        self.buffer_key = buffer_key
        self.line = line


class SyncError(TodoSyncError):
    """Engine-level synchronization failure."""
