"""Reconciliation engine exports."""

from todosync.engine.cache import LocalCache, load_cache, persist_cache
from todosync.engine.context import SyncContext
from todosync.engine.engine import SyncEngine
from todosync.engine.notify import LoggingNotifier, Notifier
from todosync.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from todosync.engine.reconcile import plan_pull, plan_push
from todosync.engine.snapshot import RemoteSnapshot

__all__ = [
    "LocalCache",
    "LoggingNotifier",
    "Notifier",
    "NullSyncProgress",
    "RemoteSnapshot",
    "SyncContext",
    "SyncEngine",
    "SyncPhase",
    "SyncProgress",
    "load_cache",
    "persist_cache",
    "plan_pull",
    "plan_push",
]
