"""HTTP client helper."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiohttp

from ..core.exceptions import (
    FrontierError,
    MalformedResponseError,
    ServerError,
    TransportError,
    server_error_for,
)

logger = logging.getLogger(__name__)

EVENT_STREAM = "text/event-stream"


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


class HTTPClient:
    """Async HTTP client wrapper.

    One aiohttp session is shared by every builder, record link and stream
    created from the same Server. Default headers (client identification and
    caller credentials) are merged into each request.
    """

    def __init__(self, timeout: float = 30.0, headers: dict[str, str] | None = None) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = dict(headers or {})
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def _merge_headers(self, accept: str, headers: dict[str, str] | None) -> dict[str, str]:
        merged = {"Accept": accept, **self.headers}
        if headers:
            merged.update(headers)
        return merged

    async def get(self, url: str, headers: dict[str, str] | None = None) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Raises:
            TransportError: Connection failure or timeout
            ServerError: Non-2xx status (problem body attached)
            MalformedResponseError: Body is not valid JSON
        """
        logger.debug("GET request", extra={"url": url})
        try:
            async with self.session.get(
                url, headers=self._merge_headers("application/json", headers)
            ) as response:
                await self.raise_for_status(response, url)
                text = await response.text()
        except FrontierError:
            raise
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out: {url}", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}", url=url) from e

        try:
            return json.loads(text)
        except ValueError as e:
            raise MalformedResponseError("Response body is not valid JSON", body=text) from e

    @asynccontextmanager
    async def open_stream(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        idle_timeout: float | None = None,
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """Open a long-lived event-stream response.

        The total timeout is disabled; ``idle_timeout`` bounds the wait for any
        single read instead.
        """
        timeout = aiohttp.ClientTimeout(total=None, sock_read=idle_timeout)
        logger.debug("Opening event stream", extra={"url": url})
        async with self.session.get(
            url, headers=self._merge_headers(EVENT_STREAM, headers), timeout=timeout
        ) as response:
            await self.raise_for_status(response, url)
            yield response

    @staticmethod
    async def raise_for_status(response: aiohttp.ClientResponse, url: str) -> None:
        """Raise a ServerError carrying the problem body for non-2xx responses."""
        if 200 <= response.status < 300:
            return
        try:
            text = await response.text()
        except aiohttp.ClientError:
            text = ""
        try:
            problem: Any = json.loads(text) if text else None
        except ValueError:
            problem = text
        error: ServerError = server_error_for(
            response.status,
            problem=problem,
            url=url,
            retry_after=parse_retry_after(response.headers.get("Retry-After")),
        )
        raise error

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
