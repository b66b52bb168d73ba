"""Executes classified operations against the remote store and local buffers."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from todosync.contracts.buffer import TextBuffer
from todosync.contracts.config import TodoSyncConfig
from todosync.contracts.enums import OperationKind
from todosync.contracts.exceptions import BufferWriteRejected, ProviderError, SyncError
from todosync.contracts.marker import Marker
from todosync.contracts.sync import ItemFailure, PullOperation, PullResult, PushOperation, PushResult
from todosync.engine.context import SyncContext
from todosync.engine.progress import NullSyncProgress, SyncPhase, SyncProgress
from todosync.markers.extractor import scan_line
from todosync.markers.stamper import StampPlan, rewrite_text

logger = logging.getLogger(__name__)


class MutationApplier:
    """Applies one pass's mutations, one at a time.

    Remote calls are isolated per record: a failure is recorded in the
    result's ``failures`` and the rest of the batch still runs.
    """

    def __init__(
        self,
        context: SyncContext,
        config: TodoSyncConfig,
        *,
        dry_run: bool = False,
        progress: SyncProgress | None = None,
    ) -> None:
        self._context = context
        self._config = config
        self._dry_run = dry_run
        self._progress: SyncProgress = progress or NullSyncProgress()

    # ------------------------------------------------------------------
    # Identifier injection
    # ------------------------------------------------------------------

    async def apply_stamps(self, buffer: TextBuffer, plan: StampPlan, result: PushResult) -> None:
        """Write the stamp edits and save the buffer as a programmatic save.

        Markers whose identifier could not be persisted keep it for this pass
        only and are listed in ``result.unstamped``.
        """
        if not plan.edits:
            return
        if self._dry_run:
            result.stamped.extend(plan.stamped_ids)
            return

        applied: list[str] = []
        for edit in plan.edits:
            try:
                await buffer.replace_line(edit.line, edit.text)
            except BufferWriteRejected as exc:
                logger.warning("Could not embed id %s at line %d: %s", edit.marker_id, edit.line + 1, exc)
                result.unstamped.append(edit.marker_id)
                continue
            applied.append(edit.marker_id)

        if not applied:
            self._context.notifier.error(f"Failed to embed marker ids in {buffer.path}.")
            return

        self._context.suppress_next_save(buffer.key)
        if await buffer.save():
            result.stamped.extend(applied)
            logger.debug("Embedded %d marker ids in %s", len(applied), buffer.path)
            return

        self._context.clear_suppression(buffer.key)
        result.unstamped.extend(applied)
        self._context.notifier.error(f"Failed to save {buffer.path} after embedding marker ids.")

    # ------------------------------------------------------------------
    # Remote mutations
    # ------------------------------------------------------------------

    async def apply_push(self, operations: Sequence[PushOperation], result: PushResult) -> None:
        self._progress.phase_start(SyncPhase.PUSH, total=len(operations))
        for operation in operations:
            try:
                await self._apply_push_operation(operation, result)
            except ProviderError as exc:
                logger.warning("%s failed for marker %s: %s", operation.kind, operation.marker_id, exc)
                result.failures.append(
                    ItemFailure(marker_id=operation.marker_id, operation=operation.kind, message=str(exc))
                )
            self._progress.item_done(SyncPhase.PUSH)
        self._progress.phase_done(SyncPhase.PUSH)

    async def _apply_push_operation(self, operation: PushOperation, result: PushResult) -> None:
        provider = self._context.provider
        if operation.kind == OperationKind.NOOP:
            result.unchanged += 1
            return

        if operation.kind == OperationKind.CREATE:
            marker = _require_marker(operation)
            key = await provider.create_record(marker.to_fields(self._config.default_status))
            logger.info("Created remote record %s for marker %s", key, marker.id)
            result.created.append(operation.marker_id)
        elif operation.kind == OperationKind.UPDATE:
            marker = _require_marker(operation)
            await provider.update_record(_require_key(operation), marker.to_fields())
            logger.info("Updated remote record %s for marker %s", operation.remote_key, marker.id)
            result.updated.append(operation.marker_id)
        elif operation.kind == OperationKind.DELETE:
            await provider.archive_record(_require_key(operation))
            logger.info("Archived remote record %s for marker %s", operation.remote_key, operation.marker_id)
            result.deleted.append(operation.marker_id)
        else:
            raise SyncError(f"Unsupported push operation: {operation.kind}")

    # ------------------------------------------------------------------
    # Local mutations
    # ------------------------------------------------------------------

    async def apply_pull(self, buffer: TextBuffer, operations: Sequence[PullOperation], result: PullResult) -> None:
        """Apply pull operations to one buffer.

        Line indices are resolved against the buffer's current content before
        any edit: replacements first, then deletions from the bottom up so no
        edit shifts a line that is still to be processed.
        """
        if not operations:
            return

        lines = await buffer.read_lines()
        leaders = self._config.comment_leaders
        updates: list[tuple[int, PullOperation]] = []
        deletes: list[tuple[int, PullOperation]] = []
        for operation in operations:
            index = _locate(lines, operation, leaders)
            if index is None:
                result.failures.append(
                    ItemFailure(
                        marker_id=operation.marker_id,
                        operation=operation.kind,
                        message=f"marker no longer present in {buffer.path}",
                    )
                )
                continue
            if operation.kind == OperationKind.LOCAL_DELETE:
                deletes.append((index, operation))
            else:
                updates.append((index, operation))

        if self._dry_run:
            result.updated.extend(operation.marker_id for _, operation in updates)
            result.deleted.extend(operation.marker_id for _, operation in deletes)
            return

        applied: list[PullOperation] = []
        for index, operation in updates:
            new_line = rewrite_text(lines[index], operation.new_text or "", leaders)
            if await self._edit(buffer, operation, result, new_line=new_line, index=index):
                applied.append(operation)
        for index, operation in sorted(deletes, key=lambda pair: pair[0], reverse=True):
            if await self._edit(buffer, operation, result, new_line=None, index=index):
                applied.append(operation)

        if not applied:
            return

        self._context.suppress_next_save(buffer.key)
        if not await buffer.save():
            self._context.clear_suppression(buffer.key)
            self._context.notifier.error(f"Failed to save {buffer.path} after applying remote changes.")
            for operation in applied:
                result.failures.append(
                    ItemFailure(marker_id=operation.marker_id, operation=operation.kind, message="buffer save declined")
                )
            return

        for operation in applied:
            if operation.kind == OperationKind.LOCAL_DELETE:
                result.deleted.append(operation.marker_id)
            else:
                result.updated.append(operation.marker_id)

    async def _edit(
        self,
        buffer: TextBuffer,
        operation: PullOperation,
        result: PullResult,
        *,
        new_line: str | None,
        index: int,
    ) -> bool:
        try:
            if new_line is None:
                await buffer.delete_line(index)
                logger.info("Removed marker %s from %s:%d", operation.marker_id, buffer.path, index + 1)
            else:
                await buffer.replace_line(index, new_line)
                logger.info("Rewrote marker %s in %s:%d", operation.marker_id, buffer.path, index + 1)
        except BufferWriteRejected as exc:
            logger.warning("Local %s failed for marker %s: %s", operation.kind, operation.marker_id, exc)
            result.failures.append(ItemFailure(marker_id=operation.marker_id, operation=operation.kind, message=str(exc)))
            return False
        return True


def _locate(lines: Sequence[str], operation: PullOperation, leaders: Sequence[str]) -> int | None:
    if 0 <= operation.line < len(lines) and scan_line(lines[operation.line], leaders).marker_id == operation.marker_id:
        return operation.line
    for index, line in enumerate(lines):
        if scan_line(line, leaders).marker_id == operation.marker_id:
            return index
    return None


def _require_marker(operation: PushOperation) -> Marker:
    if operation.marker is None:
        raise SyncError(f"{operation.kind} operation for {operation.marker_id} has no marker")
    return operation.marker


def _require_key(operation: PushOperation) -> str:
    if not operation.remote_key:
        raise SyncError(f"{operation.kind} operation for {operation.marker_id} has no remote key")
    return operation.remote_key
