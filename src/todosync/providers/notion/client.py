"""Thin async client for the Notion REST API."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from todosync.contracts.exceptions import (
    AuthenticationError,
    ProviderError,
    RecordNotFoundError,
    RemoteUnavailable,
)
from todosync.providers.notion._retrying_transport import RetryingTransport

logger = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

_PAGE_SIZE = 100
_MAX_PAGES = 500


class NotionClient:
    """Wraps ``httpx.AsyncClient`` and maps Notion errors onto provider exceptions.

    Args:
        token: Integration token, sent as a bearer token.
        max_retries: Retries for transient failures (see :class:`RetryingTransport`).
        transport: Inner transport; tests pass an ``httpx.MockTransport``.
        base_url: API root.
    """

    def __init__(
        self,
        token: str,
        *,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str = NOTION_API_URL,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": NOTION_VERSION,
                "Content-Type": "application/json",
            },
            transport=RetryingTransport(transport=transport, max_retries=max_retries),
            timeout=httpx.Timeout(30.0),
        )

    async def __aenter__(self) -> NotionClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/databases/{database_id}")

    async def query_database(self, database_id: str) -> list[dict[str, Any]]:
        """Return every page of *database_id*, following ``next_cursor``."""
        pages: list[dict[str, Any]] = []
        cursor: str | None = None
        for _ in range(_MAX_PAGES):
            body: dict[str, Any] = {"page_size": _PAGE_SIZE}
            if cursor:
                body["start_cursor"] = cursor
            payload = await self._request("POST", f"/databases/{database_id}/query", json=body)

            results = payload.get("results")
            if not isinstance(results, list):
                raise ProviderError("Notion query response is missing 'results'")
            pages.extend(page for page in results if isinstance(page, dict))

            cursor = payload.get("next_cursor")
            if not payload.get("has_more") or not cursor:
                logger.debug("Fetched %d pages from database %s", len(pages), database_id)
                return pages
        raise ProviderError("Database query exceeded the page limit.")

    async def create_page(self, database_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        body = {"parent": {"database_id": database_id}, "properties": properties}
        return await self._request("POST", "/pages", json=body)

    async def update_page(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", f"/pages/{page_id}", json={"properties": properties})

    async def archive_page(self, page_id: str) -> dict[str, Any]:
        return await self._request("PATCH", f"/pages/{page_id}", json={"archived": True})

    async def _request(self, method: str, path: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as exc:
            raise RemoteUnavailable(f"Notion request failed: {exc}") from exc

        if response.is_error:
            raise _error_for(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(f"Notion returned invalid JSON for {method} {path}") from exc
        if not isinstance(payload, dict):
            raise ProviderError(f"Notion returned an unexpected payload for {method} {path}")
        return payload


def _error_for(response: httpx.Response) -> ProviderError:
    status = response.status_code
    message = _error_message(response)
    if status in (401, 403):
        return AuthenticationError(f"Notion rejected the token ({status}): {message}")
    if status == 404:
        return RecordNotFoundError(
            f"Notion object not found ({message}). Make sure the database is shared with the integration."
        )
    if status == 429 or status >= 500:
        return RemoteUnavailable(f"Notion is unavailable ({status}): {message}")
    return ProviderError(f"Notion request failed ({status}): {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return response.reason_phrase
