"""Server-sent events transport over aiohttp.

Frontier pushes stream updates as ``text/event-stream``: blocks of
``field: value`` lines separated by a blank line. Each block carries the
record's paging token as ``id`` and the record JSON as ``data``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import aiohttp

from ...core.exceptions import FrontierError, TransportError
from ...utils.http import HTTPClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerSentEvent:
    """One dispatched event block."""

    data: str
    event: str = "message"
    id: str | None = None
    retry: float | None = None  # seconds, last value announced by the server


class EventStreamParser:
    """Line-oriented parser for the event-stream format."""

    def __init__(self) -> None:
        self.last_event_id: str | None = None
        self.retry: float | None = None
        self._data: list[str] = []
        self._event = ""

    def feed_line(self, line: str) -> ServerSentEvent | None:
        """Consume one line; return an event when a block is complete."""
        line = line.rstrip("\r\n")
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "data":
            self._data.append(value)
        elif name == "event":
            self._event = value
        elif name == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif name == "retry":
            if value.isdigit():
                self.retry = int(value) / 1000.0
        return None

    def _dispatch(self) -> ServerSentEvent | None:
        data, event = self._data, self._event
        self._data, self._event = [], ""
        if not data:
            return None
        return ServerSentEvent(
            data="\n".join(data),
            event=event or "message",
            id=self.last_event_id,
            retry=self.retry,
        )


class EventStreamTransport:
    """Opens one event-stream connection and yields its events until it ends."""

    def __init__(self, client: HTTPClient) -> None:
        self._client = client

    async def events(
        self, url: str, *, idle_timeout: float | None = None
    ) -> AsyncIterator[ServerSentEvent]:
        """Yield events from a single connection.

        Returns when the server ends the stream. Does not reconnect; that is
        the subscription's job.

        Raises:
            TransportError: Connection failure, read error or idle timeout
            ServerError: Non-2xx status when opening the stream
        """
        parser = EventStreamParser()
        try:
            async with self._client.open_stream(url, idle_timeout=idle_timeout) as response:
                async for raw_line in response.content:
                    event = parser.feed_line(raw_line.decode("utf-8", errors="replace"))
                    if event is not None:
                        yield event
        except FrontierError:
            raise
        except asyncio.TimeoutError as e:
            raise TransportError(f"Stream idle for more than {idle_timeout}s", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Stream connection failed: {e}", url=url) from e
        logger.debug("Stream ended by server", extra={"url": url})
