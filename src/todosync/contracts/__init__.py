"""Public contracts for todosync."""

from todosync.contracts.buffer import TextBuffer
from todosync.contracts.config import FieldConfig, TodoSyncConfig
from todosync.contracts.enums import MarkerKind, OperationKind
from todosync.contracts.exceptions import (
    AuthenticationError,
    BufferWriteRejected,
    ConfigError,
    ConfigurationMissing,
    MalformedRemoteField,
    ProviderError,
    RecordNotFoundError,
    RemoteUnavailable,
    SyncError,
    TodoSyncError,
)
from todosync.contracts.marker import Marker
from todosync.contracts.provider import Provider
from todosync.contracts.record import FieldSupport, RecordFields, RemoteRecord
from todosync.contracts.sync import ItemFailure, PullOperation, PullResult, PushOperation, PushResult

__all__ = [
    "AuthenticationError",
    "BufferWriteRejected",
    "ConfigError",
    "ConfigurationMissing",
    "FieldConfig",
    "FieldSupport",
    "ItemFailure",
    "MalformedRemoteField",
    "Marker",
    "MarkerKind",
    "OperationKind",
    "Provider",
    "ProviderError",
    "PullOperation",
    "PullResult",
    "PushOperation",
    "PushResult",
    "RecordFields",
    "RecordNotFoundError",
    "RemoteRecord",
    "RemoteUnavailable",
    "SyncError",
    "TextBuffer",
    "TodoSyncConfig",
    "TodoSyncError",
]
