"""Sync passes: save-triggered push and on-demand pull."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from todosync.auth.base import TokenResolver
from todosync.contracts.buffer import TextBuffer
from todosync.contracts.config import TodoSyncConfig
from todosync.contracts.enums import OperationKind
from todosync.contracts.exceptions import AuthenticationError, ConfigurationMissing, RemoteUnavailable
from todosync.contracts.marker import Marker
from todosync.contracts.sync import PullResult, PushOperation, PushResult
from todosync.engine.applier import MutationApplier
from todosync.engine.context import SyncContext
from todosync.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from todosync.engine.reconcile import plan_pull, plan_push
from todosync.engine.snapshot import RemoteSnapshot
from todosync.markers.extractor import extract_markers
from todosync.markers.stamper import plan_stamps

logger = logging.getLogger(__name__)


class SyncEngine:
    """Runs reconciliation passes against one remote store.

    A push pass runs in these steps:
    1. Suppression: skip the save we triggered ourselves
    2. Preflight: store identity and auth token must be present
    3. Scan: extract markers from the buffer
    4. Stamp: embed identifiers for unassigned markers and save
    5. Fetch: snapshot the remote store
    6. Push: create, update or archive remote records, then replace the cache

    A pull pass fetches the remote snapshot and rewrites or removes matching
    marker lines in each buffer. It never adds lines.

    Args:
        context: Session state (provider, cache, notifier, locks).
        config: Sync configuration.
        token_resolver: Checked during preflight; ``None`` skips the token check.
        dry_run: When *True*, no buffer or cache writes happen; the provider
            should be a :class:`~todosync.providers.dry_run.DryRunProvider`.
        progress: Progress observer.
    """

    def __init__(
        self,
        context: SyncContext,
        config: TodoSyncConfig,
        *,
        token_resolver: TokenResolver | None = None,
        dry_run: bool = False,
        progress: SyncProgress | None = None,
    ) -> None:
        self._context = context
        self._config = config
        self._token_resolver = token_resolver
        self._dry_run = dry_run
        self._progress: SyncProgress = progress or NullSyncProgress()
        self._applier = MutationApplier(context, config, dry_run=dry_run, progress=self._progress)

    @property
    def context(self) -> SyncContext:
        return self._context

    async def ensure_configured(self) -> None:
        """Raise :class:`ConfigurationMissing` unless a pass can talk to the store."""
        if not self._config.database_id.strip():
            raise ConfigurationMissing("No database id configured. Set database_id in the config file.")
        if self._token_resolver is None:
            return
        try:
            await self._token_resolver.resolve()
        except AuthenticationError as exc:
            raise ConfigurationMissing(f"No API token available: {exc}") from exc

    # ------------------------------------------------------------------
    # Push
    # ------------------------------------------------------------------

    async def handle_save(self, buffer: TextBuffer) -> PushResult:
        """Run the push pass triggered by a save of *buffer*."""
        result = PushResult(buffer_key=buffer.key, dry_run=self._dry_run)
        if self._context.consume_suppression(buffer.key):
            logger.debug("Skipping sync for programmatic save: %s", buffer.key)
            result.skipped = True
            return result

        try:
            await self.ensure_configured()
        except ConfigurationMissing as exc:
            result.aborted = str(exc)
            self._context.notifier.warning(str(exc))
            return result

        async with self._context.lock_for(buffer.key):
            await self._push(buffer, result)
        self._report_push(buffer, result)
        return result

    async def _push(self, buffer: TextBuffer, result: PushResult) -> None:
        self._progress.phase_start(SyncPhase.SCAN)
        lines = await buffer.read_lines()
        markers = extract_markers(
            lines,
            buffer.path,
            leaders=self._config.comment_leaders,
            limit=self._config.max_markers_per_file,
        )
        self._progress.phase_done(SyncPhase.SCAN)

        cached_ids = self._context.cache.keys(buffer.key)
        if not markers and not cached_ids:
            logger.debug("No markers to sync in %s", buffer.path)
            return

        plan = plan_stamps(markers, lines)
        self._progress.phase_start(SyncPhase.STAMP, total=len(plan.edits))
        await self._applier.apply_stamps(buffer, plan, result)
        self._progress.phase_done(SyncPhase.STAMP)
        # An id that never reached the buffer would be re-generated next pass.
        unstamped = set(result.unstamped)
        markers = [marker for marker in plan.markers if marker.id not in unstamped]

        snapshot = await self._fetch()
        if not snapshot.available:
            result.remote_available = False
            self._context.notifier.warning(f"Remote store unavailable; {buffer.path} was not synced.")
            return

        operations = plan_push(markers, cached_ids, snapshot)
        logger.debug(
            "Classified %d operations for %s: %s",
            len(operations),
            buffer.path,
            ", ".join(f"{op.kind}:{op.marker_id}" for op in operations) or "none",
        )
        await self._applier.apply_push(operations, result)

        if not self._dry_run:
            self._replace_cache(buffer.key, markers, operations, result)

    def _replace_cache(
        self,
        buffer_key: str,
        markers: Sequence[Marker],
        operations: Sequence[PushOperation],
        result: PushResult,
    ) -> None:
        entries = {marker.id: marker for marker in markers if marker.id}
        # An archive that failed is kept so the next pass retries it.
        failed_deletes = {f.marker_id for f in result.failures if f.operation == OperationKind.DELETE}
        if failed_deletes:
            previous = self._context.cache.get(buffer_key)
            for operation in operations:
                if operation.marker_id in failed_deletes and operation.marker_id in previous:
                    entries.setdefault(operation.marker_id, previous[operation.marker_id])
        self._context.cache.set(buffer_key, entries)

    def _report_push(self, buffer: TextBuffer, result: PushResult) -> None:
        notifier = self._context.notifier
        if result.created:
            notifier.info(f"Synced {len(result.created)} new TODOs from {buffer.path}.")
        if result.updated:
            notifier.info(f"Updated {len(result.updated)} TODOs from {buffer.path}.")
        if result.deleted:
            notifier.info(f"Archived {len(result.deleted)} TODOs removed from {buffer.path}.")
        if result.failures:
            notifier.error(f"{len(result.failures)} TODO operations failed for {buffer.path}; see the log.")
        logger.debug(
            "Sync result for %s: %d created, %d updated, %d deleted, %d unchanged",
            buffer.key,
            len(result.created),
            len(result.updated),
            len(result.deleted),
            result.unchanged,
        )

    # ------------------------------------------------------------------
    # Pull
    # ------------------------------------------------------------------

    async def pull(self, buffers: Sequence[TextBuffer]) -> PullResult:
        """Run the pull pass over *buffers* (the open documents)."""
        result = PullResult(dry_run=self._dry_run)
        try:
            await self.ensure_configured()
        except ConfigurationMissing as exc:
            result.aborted = str(exc)
            self._context.notifier.warning(str(exc))
            return result

        snapshot = await self._fetch()
        if not snapshot.available:
            result.remote_available = False
            self._context.notifier.warning("Remote store unavailable; nothing was pulled.")
            return result

        self._progress.phase_start(SyncPhase.PULL, total=len(buffers))
        for buffer in buffers:
            async with self._context.lock_for(buffer.key):
                lines = await buffer.read_lines()
                markers = extract_markers(
                    lines,
                    buffer.path,
                    leaders=self._config.comment_leaders,
                    limit=self._config.max_markers_per_file,
                )
                operations = plan_pull(
                    snapshot,
                    markers,
                    buffer.key,
                    archived_status=self._config.archived_status,
                )
                deleted_before = len(result.deleted)
                await self._applier.apply_pull(buffer, operations, result)
                if not self._dry_run:
                    self._context.cache.discard(buffer.key, result.deleted[deleted_before:])
            result.buffers_scanned += 1
            self._progress.item_done(SyncPhase.PULL)
        self._progress.phase_done(SyncPhase.PULL)

        self._report_pull(result)
        return result

    def _report_pull(self, result: PullResult) -> None:
        notifier = self._context.notifier
        if result.updated:
            notifier.info(f"Updated {len(result.updated)} TODOs from the remote store.")
        if result.deleted:
            notifier.info(f"Deleted {len(result.deleted)} TODOs archived in the remote store.")
        if result.failures:
            notifier.error(f"{len(result.failures)} local TODO edits failed; see the log.")
        if not result.updated and not result.deleted and not result.failures:
            notifier.info("No changes needed. Code is in sync with the remote store.")

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    async def _fetch(self) -> RemoteSnapshot:
        self._progress.phase_start(SyncPhase.FETCH)
        snapshot = await RemoteSnapshot.fetch(self._context.provider)
        if snapshot.available:
            self._progress.phase_done(SyncPhase.FETCH)
        else:
            self._progress.phase_error(SyncPhase.FETCH, RemoteUnavailable("remote store unavailable"))
        return snapshot
