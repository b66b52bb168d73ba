"""Remote store adapter contract.

A provider is bound to one store (e.g. one Notion database) at construction
time. All methods are ``async``; failures raise
:class:`~todosync.contracts.exceptions.ProviderError` subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from todosync.contracts.record import FieldSupport, RecordFields, RemoteRecord


class Provider(ABC):
    @abstractmethod
    async def __aenter__(self) -> Provider: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def list_records(self) -> list[RemoteRecord]: ...  # pragma: no cover

    @abstractmethod
    async def create_record(self, fields: RecordFields) -> str:
        """Create a record and return its store-assigned key."""

    @abstractmethod
    async def update_record(self, key: str, fields: RecordFields) -> None: ...  # pragma: no cover

    @abstractmethod
    async def archive_record(self, key: str) -> None:
        """Soft-delete the record; the store keeps it in an archived state."""

    @abstractmethod
    async def describe_schema(self) -> dict[str, str]:
        """Return ``{field_name: field_type}`` for the bound store."""

    async def field_support(self) -> FieldSupport:
        """Describe what the store keeps of a written record; everything by default."""
        return FieldSupport()
