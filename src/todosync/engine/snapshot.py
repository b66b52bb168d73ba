"""Read-through snapshot of the remote store for one pass."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from todosync.contracts.exceptions import ProviderError
from todosync.contracts.provider import Provider
from todosync.contracts.record import FieldSupport, RemoteRecord

logger = logging.getLogger(__name__)


class RemoteSnapshot:
    """All remote records, indexed by store key and by embedded marker id.

    ``available`` is ``False`` when the fetch failed. Such a snapshot is empty
    but means "unknown", not "the store has no records": callers must not
    create or delete anything on the strength of it.

    ``support`` tells reconciliation which fields the store keeps.
    """

    def __init__(
        self,
        records: Iterable[RemoteRecord] = (),
        *,
        available: bool = True,
        support: FieldSupport | None = None,
    ) -> None:
        self.records: list[RemoteRecord] = list(records)
        self.available = available
        self.support = support or FieldSupport()
        self.by_key: dict[str, RemoteRecord] = {}
        self.by_marker_id: dict[str, RemoteRecord] = {}
        for record in self.records:
            self.by_key[record.key] = record
            if not record.marker_id:
                continue
            if record.marker_id in self.by_marker_id:
                logger.warning(
                    "Remote records %s and %s share marker id %s; keeping the first",
                    self.by_marker_id[record.marker_id].key,
                    record.key,
                    record.marker_id,
                )
                continue
            self.by_marker_id[record.marker_id] = record

    @classmethod
    def unknown(cls) -> RemoteSnapshot:
        return cls(available=False)

    @classmethod
    async def fetch(cls, provider: Provider) -> RemoteSnapshot:
        try:
            records = await provider.list_records()
            support = await provider.field_support()
        except ProviderError as exc:
            logger.warning("Remote fetch failed, treating remote state as unknown: %s", exc)
            return cls.unknown()
        logger.debug("Fetched %d remote records", len(records))
        return cls(records, support=support)

    def get(self, marker_id: str | None) -> RemoteRecord | None:
        if not marker_id:
            return None
        return self.by_marker_id.get(marker_id)

    def __len__(self) -> int:
        return len(self.records)
