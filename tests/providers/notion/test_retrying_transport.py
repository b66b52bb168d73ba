"""Tests for RetryingTransport - retry, backoff, and rate-limit handling."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from todosync.providers.notion._retrying_transport import RetryingTransport

_BACKOFF = "todosync.providers.notion._retrying_transport.RetryingTransport._sleep_backoff"


def _make_response(status_code: int = 200, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(status_code=status_code, headers=headers or {})


def _make_request() -> httpx.Request:
    return httpx.Request("POST", "https://api.notion.com/v1/databases/db/query")


class TestConstruction:
    def test_defaults(self) -> None:
        transport = RetryingTransport()
        assert transport._max_retries == 3

    def test_custom_inner_transport(self) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        transport = RetryingTransport(transport=inner, max_retries=5)
        assert transport._transport is inner
        assert transport._max_retries == 5


class TestRetries:
    @pytest.mark.asyncio
    async def test_returns_successful_response(self) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.return_value = _make_response(200)

        response = await RetryingTransport(transport=inner).handle_async_request(_make_request())

        assert response.status_code == 200
        assert inner.handle_async_request.call_count == 1

    @pytest.mark.asyncio
    @patch(_BACKOFF, new_callable=AsyncMock)
    async def test_retries_on_transport_error_then_succeeds(self, mock_backoff: AsyncMock) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.side_effect = [httpx.ConnectError("reset"), _make_response(200)]

        response = await RetryingTransport(transport=inner, max_retries=2).handle_async_request(_make_request())

        assert response.status_code == 200
        mock_backoff.assert_awaited_once_with(0)

    @pytest.mark.asyncio
    @patch(_BACKOFF, new_callable=AsyncMock)
    async def test_raises_transport_error_when_retries_exhausted(self, mock_backoff: AsyncMock) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.side_effect = httpx.ConnectError("down")

        with pytest.raises(httpx.ConnectError):
            await RetryingTransport(transport=inner, max_retries=2).handle_async_request(_make_request())

        assert inner.handle_async_request.call_count == 3
        assert mock_backoff.await_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [409, 500, 502, 503, 504])
    @patch(_BACKOFF, new_callable=AsyncMock)
    async def test_retries_transient_status_codes(self, mock_backoff: AsyncMock, status: int) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.side_effect = [_make_response(status), _make_response(200)]

        response = await RetryingTransport(transport=inner, max_retries=1).handle_async_request(_make_request())

        assert response.status_code == 200
        mock_backoff.assert_awaited_once_with(0)

    @pytest.mark.asyncio
    @patch(_BACKOFF, new_callable=AsyncMock)
    async def test_returns_last_transient_response_when_retries_exhausted(self, mock_backoff: AsyncMock) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.return_value = _make_response(503)

        response = await RetryingTransport(transport=inner, max_retries=1).handle_async_request(_make_request())

        assert response.status_code == 503
        assert inner.handle_async_request.call_count == 2

    @pytest.mark.asyncio
    @patch(_BACKOFF, new_callable=AsyncMock)
    async def test_does_not_retry_client_errors(self, mock_backoff: AsyncMock) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.return_value = _make_response(400)

        response = await RetryingTransport(transport=inner).handle_async_request(_make_request())

        assert response.status_code == 400
        mock_backoff.assert_not_awaited()


class TestRateLimit:
    @pytest.mark.asyncio
    @patch(_BACKOFF, new_callable=AsyncMock)
    async def test_rate_limit_pauses_then_retries(self, mock_backoff: AsyncMock) -> None:
        inner = AsyncMock(spec=httpx.AsyncBaseTransport)
        inner.handle_async_request.side_effect = [
            _make_response(429, {"Retry-After": "0"}),
            _make_response(200),
        ]

        response = await RetryingTransport(transport=inner).handle_async_request(_make_request())

        assert response.status_code == 200
        mock_backoff.assert_awaited_once_with(0)

    def test_parse_retry_after(self) -> None:
        assert RetryingTransport._parse_retry_after(_make_response(429, {"Retry-After": "2.5"})) == 2.5
        assert RetryingTransport._parse_retry_after(_make_response(429, {"Retry-After": "soon"})) == 1.0
        assert RetryingTransport._parse_retry_after(_make_response(429)) == 1.0
        assert RetryingTransport._parse_retry_after(_make_response(503), default=0.0) == 0.0
        assert RetryingTransport._parse_retry_after(_make_response(429, {"Retry-After": "600"})) == 60.0
