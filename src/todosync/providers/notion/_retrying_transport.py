"""httpx transport that retries transient Notion failures."""

from __future__ import annotations

import asyncio
import logging
import random
import time

import httpx

_LOG = logging.getLogger(__name__)

# Notion answers 409 when a write collides with another transaction.
_RETRYABLE_STATUS_CODES = frozenset({409, 429, 500, 502, 503, 504})

_MAX_RETRY_AFTER = 60.0
_MAX_BACKOFF = 4.0


class RetryingTransport(httpx.AsyncBaseTransport):
    """Retries transport errors and transient status codes up to *max_retries* times.

    Notion limits an integration to a few requests per second and answers
    429 with ``Retry-After``. A 429 closes a gate shared by every request on
    this transport until the pause ends, so concurrent passes back off
    together. The final response is returned as-is once retries run out;
    status-to-exception mapping is left to :class:`NotionClient`.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._gate_lock = asyncio.Lock()
        self._gate_open = asyncio.Event()
        self._gate_open.set()
        self._paused_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            await self._gate_open.wait()
            final = attempt >= self._max_retries

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if final:
                    raise
                _LOG.debug("%s %s failed: %s", request.method, request.url.path, exc)
            else:
                status = response.status_code
                if status not in _RETRYABLE_STATUS_CODES:
                    return response
                if status == 429:
                    await self._pause(self._parse_retry_after(response))
                if final:
                    return response
                _LOG.debug("Notion returned %d for %s %s", status, request.method, request.url.path)
                await response.aclose()
                if status != 429:
                    retry_after = self._parse_retry_after(response, default=0.0)
                    if retry_after > 0:
                        await asyncio.sleep(retry_after)

            await self._sleep_backoff(attempt)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _pause(self, seconds: float) -> None:
        async with self._gate_lock:
            until = time.monotonic() + seconds
            if until <= self._paused_until:
                return
            self._paused_until = until
            self._gate_open.clear()

        _LOG.warning("Notion rate limit hit; pausing requests for %.1fs", seconds)
        await asyncio.sleep(max(0.0, self._paused_until - time.monotonic()))

        async with self._gate_lock:
            if time.monotonic() >= self._paused_until:
                self._gate_open.set()

    @staticmethod
    def _parse_retry_after(response: httpx.Response, default: float = 1.0) -> float:
        """Seconds from the ``Retry-After`` header, clamped to ``[0, 60]``."""
        raw = response.headers.get("Retry-After")
        if raw is None:
            return default
        try:
            return min(_MAX_RETRY_AFTER, max(0.0, float(raw)))
        except ValueError:
            return default

    @staticmethod
    async def _sleep_backoff(attempt: int) -> None:
        seconds = min(_MAX_BACKOFF, float(2**attempt)) + random.uniform(0.0, 0.25)
        _LOG.warning("Retrying Notion request (attempt %d)", attempt + 1)
        await asyncio.sleep(seconds)
