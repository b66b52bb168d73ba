"""SDK composition root for todosync."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from todosync.auth import TokenResolver, create_token_resolver
from todosync.contracts.buffer import TextBuffer
from todosync.contracts.config import TodoSyncConfig
from todosync.contracts.exceptions import AuthenticationError, ConfigurationMissing
from todosync.contracts.provider import Provider
from todosync.contracts.sync import PullResult, PushResult
from todosync.engine import LocalCache, SyncContext, SyncEngine, load_cache, persist_cache
from todosync.engine.notify import Notifier
from todosync.engine.progress import SyncProgress
from todosync.providers.dry_run import DryRunProvider
from todosync.providers.factory import create_provider

logger = logging.getLogger(__name__)


class TodoSync:
    """todosync SDK public API.

    Args:
        config: Validated configuration.
        provider: Provider to use instead of the one named in *config*.
        cache: Initial local cache; loaded from ``config.cache_path`` by
            :meth:`from_config`.
        notifier: Receives user-facing messages.
        progress: Progress observer.
    """

    def __init__(
        self,
        *,
        config: TodoSyncConfig,
        provider: Provider | None = None,
        cache: LocalCache | None = None,
        notifier: Notifier | None = None,
        progress: SyncProgress | None = None,
    ) -> None:
        self._config = config
        self._provider = provider
        self._cache = cache if cache is not None else LocalCache()
        self._notifier = notifier
        self._progress = progress

    @classmethod
    async def from_config(
        cls,
        config: TodoSyncConfig,
        *,
        notifier: Notifier | None = None,
        progress: SyncProgress | None = None,
    ) -> TodoSync:
        cache = load_cache(config.cache_path) if config.cache_path is not None else LocalCache()
        return cls(config=config, cache=cache, notifier=notifier, progress=progress)

    @property
    def cache(self) -> LocalCache:
        return self._cache

    @asynccontextmanager
    async def session(self, *, dry_run: bool = False) -> AsyncIterator[SyncEngine]:
        """Open the provider and yield an engine bound to it.

        The cache is persisted to ``config.cache_path`` when the session ends
        normally, except in dry-run mode.

        Raises:
            ConfigurationMissing: If no database id or no token is available.
        """
        token_resolver = create_token_resolver(self._config)
        provider = await self._resolve_provider(token_resolver, dry_run=dry_run)
        async with provider:
            context = SyncContext(provider, cache=self._cache, notifier=self._notifier)
            yield SyncEngine(
                context,
                self._config,
                token_resolver=token_resolver if self._provider is None else None,
                dry_run=dry_run,
                progress=self._progress,
            )

        if not dry_run and self._config.cache_path is not None:
            persist_cache(self._cache, self._config.cache_path)
            logger.debug("Persisted cache to %s", self._config.cache_path)

    async def push(self, buffers: Sequence[TextBuffer], *, dry_run: bool = False) -> list[PushResult]:
        """Run one save-triggered pass per buffer."""
        async with self.session(dry_run=dry_run) as engine:
            return [await engine.handle_save(buffer) for buffer in buffers]

    async def pull(self, buffers: Sequence[TextBuffer], *, dry_run: bool = False) -> PullResult:
        async with self.session(dry_run=dry_run) as engine:
            return await engine.pull(buffers)

    async def properties(self) -> dict[str, str]:
        """Return the remote store's ``{property: type}`` schema."""
        async with self.session() as engine:
            return await engine.context.provider.describe_schema()

    async def _resolve_provider(self, token_resolver: TokenResolver, *, dry_run: bool) -> Provider:
        if self._provider is not None:
            return DryRunProvider(self._provider) if dry_run else self._provider

        if not self._config.database_id.strip():
            raise ConfigurationMissing("No database id configured. Set database_id in the config file.")
        try:
            token = await token_resolver.resolve()
        except AuthenticationError as exc:
            raise ConfigurationMissing(f"No API token available: {exc}") from exc

        provider = create_provider(
            self._config.provider,
            database_id=self._config.database_id,
            token=token,
            field_config=self._config.field_config,
            max_retries=self._config.max_retries,
        )
        return DryRunProvider(provider) if dry_run else provider
