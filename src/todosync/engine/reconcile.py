"""Pure classification of markers against cached and remote state."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from todosync.contracts.enums import OperationKind
from todosync.contracts.marker import Marker
from todosync.contracts.record import FieldSupport, RemoteRecord
from todosync.contracts.sync import PullOperation, PushOperation
from todosync.engine.snapshot import RemoteSnapshot

logger = logging.getLogger(__name__)


def fields_differ(marker: Marker, record: RemoteRecord, support: FieldSupport | None = None) -> bool:
    """Compare the fields the store keeps, as the store would hold them.

    Fields *support* says the store drops are skipped and text is clipped to
    its limit. Status only takes part when the local side asserts one.
    """
    support = support or FieldSupport()
    if support.stores("text") and support.clip(marker.text) != record.text:
        return True
    if support.stores("kind") and marker.kind != record.kind:
        return True
    if support.stores("file_path") and support.clip(marker.path) != record.file_path:
        return True
    if support.stores("line_number") and marker.line_number != record.line_number:
        return True
    return support.stores("status") and marker.status is not None and marker.status != record.status


def plan_push(
    markers: Sequence[Marker],
    cached_ids: Iterable[str],
    snapshot: RemoteSnapshot,
) -> list[PushOperation]:
    """Classify local markers (and cached-but-gone ones) for the local -> remote direction."""
    operations: list[PushOperation] = []
    local_ids: set[str] = set()

    for marker in markers:
        if not marker.id:
            logger.debug("Skipping unassigned marker at %s:%d", marker.path, marker.line_number)
            continue
        if marker.id in local_ids:
            logger.debug("Skipping repeated marker id %s at %s:%d", marker.id, marker.path, marker.line_number)
            continue
        local_ids.add(marker.id)

        record = snapshot.get(marker.id)
        if record is None:
            operations.append(PushOperation(kind=OperationKind.CREATE, marker_id=marker.id, marker=marker))
        elif fields_differ(marker, record, snapshot.support):
            operations.append(
                PushOperation(kind=OperationKind.UPDATE, marker_id=marker.id, marker=marker, remote_key=record.key)
            )
        else:
            operations.append(
                PushOperation(kind=OperationKind.NOOP, marker_id=marker.id, marker=marker, remote_key=record.key)
            )

    for cached_id in sorted(set(cached_ids) - local_ids):
        record = snapshot.get(cached_id)
        if record is None:
            logger.debug("Cached marker %s has no remote record; nothing to archive", cached_id)
            continue
        if record.archived:
            logger.debug("Remote record %s for marker %s is already archived", record.key, cached_id)
            continue
        operations.append(PushOperation(kind=OperationKind.DELETE, marker_id=cached_id, remote_key=record.key))

    return operations


def plan_pull(
    snapshot: RemoteSnapshot,
    markers: Sequence[Marker],
    buffer_key: str,
    *,
    archived_status: str,
) -> list[PullOperation]:
    """Classify remote records against one buffer's markers for the remote -> local direction.

    Only lines already carrying a matching identifier are touched; remote
    records without a local counterpart are ignored.
    """
    local_by_id: dict[str, Marker] = {}
    for marker in markers:
        if not marker.id:
            continue
        if marker.id in local_by_id:
            logger.warning("Marker id %s appears more than once in %s; using the first", marker.id, buffer_key)
            continue
        local_by_id[marker.id] = marker

    operations: list[PullOperation] = []
    for marker_id, marker in local_by_id.items():
        record = snapshot.get(marker_id)
        if record is None:
            continue
        if record.is_terminal(archived_status):
            operations.append(
                PullOperation(
                    kind=OperationKind.LOCAL_DELETE,
                    marker_id=marker_id,
                    buffer_key=buffer_key,
                    line=marker.line,
                )
            )
        elif record.text and record.text not in (marker.text, snapshot.support.clip(marker.text)):
            operations.append(
                PullOperation(
                    kind=OperationKind.LOCAL_UPDATE,
                    marker_id=marker_id,
                    buffer_key=buffer_key,
                    line=marker.line,
                    new_text=record.text,
                )
            )
    return operations
