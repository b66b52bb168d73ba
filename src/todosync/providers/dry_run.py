"""Dry-run provider: real reads, recorded writes."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

from todosync.contracts.enums import OperationKind
from todosync.contracts.provider import Provider
from todosync.contracts.record import FieldSupport, RecordFields, RemoteRecord


@dataclass(frozen=True)
class DryRunOperation:
    """A write the dry run would have sent."""

    kind: OperationKind
    key: str
    fields: RecordFields | None = None


class DryRunProvider(Provider):
    """Provider that never writes to the remote store.

    Reads are delegated to *inner* (an empty store when ``None``) so the
    classification matches a real run; writes are recorded in
    :attr:`operations` and answered with deterministic placeholder keys.
    The inner provider's context is entered and exited with this one.
    """

    def __init__(self, inner: Provider | None = None) -> None:
        self._inner = inner
        self._counter = 0
        self.operations: list[DryRunOperation] = []

    async def __aenter__(self) -> DryRunProvider:
        if self._inner is not None:
            await self._inner.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._inner is not None:
            await self._inner.__aexit__(exc_type, exc_val, exc_tb)

    async def list_records(self) -> list[RemoteRecord]:
        if self._inner is None:
            return []
        return await self._inner.list_records()

    async def describe_schema(self) -> dict[str, str]:
        if self._inner is None:
            return {}
        return await self._inner.describe_schema()

    async def field_support(self) -> FieldSupport:
        if self._inner is None:
            return FieldSupport()
        return await self._inner.field_support()

    async def create_record(self, fields: RecordFields) -> str:
        self._counter += 1
        key = f"dry-run-{self._counter}"
        self.operations.append(DryRunOperation(kind=OperationKind.CREATE, key=key, fields=fields))
        return key

    async def update_record(self, key: str, fields: RecordFields) -> None:
        self.operations.append(DryRunOperation(kind=OperationKind.UPDATE, key=key, fields=fields))

    async def archive_record(self, key: str) -> None:
        self.operations.append(DryRunOperation(kind=OperationKind.DELETE, key=key))
