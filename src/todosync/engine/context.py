"""State shared by every pass of one sync session."""

from __future__ import annotations

import asyncio
import logging

from todosync.contracts.provider import Provider
from todosync.engine.cache import LocalCache
from todosync.engine.notify import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


class SyncContext:
    """Owns the local cache, the provider handle, and per-buffer coordination state.

    Per-buffer locks make one buffer's reconciliation a critical section, so a
    save-triggered push and a pull never interleave on the same buffer.

    Save suppression is a one-shot flag per buffer: it is set right before a
    programmatic save and consumed by the next save-triggered pass for that
    buffer, whichever save triggered it.
    """

    def __init__(
        self,
        provider: Provider,
        *,
        cache: LocalCache | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else LocalCache()
        self.notifier: Notifier = notifier or LoggingNotifier()
        self._locks: dict[str, asyncio.Lock] = {}
        self._suppressed: set[str] = set()

    def lock_for(self, buffer_key: str) -> asyncio.Lock:
        lock = self._locks.get(buffer_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[buffer_key] = lock
        return lock

    def suppress_next_save(self, buffer_key: str) -> None:
        self._suppressed.add(buffer_key)

    def consume_suppression(self, buffer_key: str) -> bool:
        if buffer_key in self._suppressed:
            self._suppressed.discard(buffer_key)
            return True
        return False

    def clear_suppression(self, buffer_key: str) -> None:
        self._suppressed.discard(buffer_key)

    def is_suppressed(self, buffer_key: str) -> bool:
        return buffer_key in self._suppressed
