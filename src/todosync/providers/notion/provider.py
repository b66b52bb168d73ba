"""Notion database provider."""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from todosync.contracts.config import FieldConfig
from todosync.contracts.exceptions import MalformedRemoteField, ProviderError
from todosync.contracts.provider import Provider
from todosync.contracts.record import FieldSupport, RecordFields, RemoteRecord
from todosync.providers.notion.client import NotionClient
from todosync.providers.notion.mapper import field_support_for, properties_from_fields, record_from_page

logger = logging.getLogger(__name__)


class NotionProvider(Provider):
    """Provider bound to one Notion database.

    The database schema is fetched once per session and used to shape every
    write.
    """

    def __init__(
        self,
        *,
        database_id: str,
        token: str,
        field_config: FieldConfig | None = None,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._database_id = database_id
        self._token = token
        self._field_config = field_config or FieldConfig()
        self._max_retries = max_retries
        self._transport = transport
        self._client: NotionClient | None = None
        self._schema: dict[str, str] | None = None

    async def __aenter__(self) -> NotionProvider:
        self._client = NotionClient(self._token, max_retries=self._max_retries, transport=self._transport)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._schema = None

    async def list_records(self) -> list[RemoteRecord]:
        pages = await self._require_client().query_database(self._database_id)
        records: list[RemoteRecord] = []
        for page in pages:
            try:
                records.append(record_from_page(page, self._field_config))
            except MalformedRemoteField as exc:
                logger.warning("Skipping Notion page: %s", exc)
        return records

    async def create_record(self, fields: RecordFields) -> str:
        properties = properties_from_fields(fields, await self.describe_schema(), self._field_config)
        page = await self._require_client().create_page(self._database_id, properties)
        key = page.get("id")
        if not isinstance(key, str) or not key:
            raise MalformedRemoteField("Created Notion page has no id", field="id")
        return key

    async def update_record(self, key: str, fields: RecordFields) -> None:
        properties = properties_from_fields(fields, await self.describe_schema(), self._field_config)
        await self._require_client().update_page(key, properties)

    async def archive_record(self, key: str) -> None:
        await self._require_client().archive_page(key)

    async def describe_schema(self) -> dict[str, str]:
        if self._schema is None:
            database = await self._require_client().retrieve_database(self._database_id)
            raw = database.get("properties")
            if not isinstance(raw, dict):
                raise MalformedRemoteField("Notion database has no properties", field="properties")
            self._schema = {
                name: str(prop.get("type", "")) for name, prop in raw.items() if isinstance(prop, dict)
            }
            logger.debug("Database %s schema: %s", self._database_id, self._schema)
        return dict(self._schema)

    async def field_support(self) -> FieldSupport:
        return field_support_for(await self.describe_schema(), self._field_config)

    def _require_client(self) -> NotionClient:
        if self._client is None:
            raise ProviderError("Provider is not initialized. Use 'async with'.")
        return self._client
