"""Public API surface for todosync."""

__version__ = "1.0.0"

from todosync.auth import TokenResolver, create_token_resolver
from todosync.buffers import FileBuffer
from todosync.config import load_config, write_config
from todosync.contracts import (
    AuthenticationError,
    BufferWriteRejected,
    ConfigError,
    ConfigurationMissing,
    FieldConfig,
    FieldSupport,
    ItemFailure,
    MalformedRemoteField,
    Marker,
    MarkerKind,
    OperationKind,
    Provider,
    ProviderError,
    PullResult,
    PushResult,
    RecordFields,
    RecordNotFoundError,
    RemoteRecord,
    RemoteUnavailable,
    SyncError,
    TextBuffer,
    TodoSyncConfig,
    TodoSyncError,
)
from todosync.engine import LocalCache, Notifier, SyncContext, SyncEngine, SyncProgress
from todosync.providers import DryRunProvider, create_provider
from todosync.sdk import TodoSync

__all__ = [
    "AuthenticationError",
    "BufferWriteRejected",
    "ConfigError",
    "ConfigurationMissing",
    "DryRunProvider",
    "FieldConfig",
    "FieldSupport",
    "FileBuffer",
    "ItemFailure",
    "LocalCache",
    "MalformedRemoteField",
    "Marker",
    "MarkerKind",
    "Notifier",
    "OperationKind",
    "Provider",
    "ProviderError",
    "PullResult",
    "PushResult",
    "RecordFields",
    "RecordNotFoundError",
    "RemoteRecord",
    "RemoteUnavailable",
    "SyncContext",
    "SyncEngine",
    "SyncError",
    "SyncProgress",
    "TextBuffer",
    "TodoSync",
    "TodoSyncConfig",
    "TodoSyncError",
    "TokenResolver",
    "__version__",
    "create_provider",
    "create_token_resolver",
    "load_config",
    "write_config",
]
