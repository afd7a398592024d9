"""Unit tests for the event-stream parser and transport."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

import aiohttp
import pytest

from digitalbits.frontier.core import NotFoundError, TransportError
from digitalbits.frontier.runtime.stream.transport import (
    EventStreamParser,
    EventStreamTransport,
    ServerSentEvent,
)


def feed(parser: EventStreamParser, text: str) -> list[ServerSentEvent]:
    events = []
    for line in text.splitlines(keepends=True):
        event = parser.feed_line(line)
        if event is not None:
            events.append(event)
    return events


class TestEventStreamParser:
    """Test event block parsing."""

    def test_single_event(self):
        events = feed(EventStreamParser(), 'id: 51\ndata: {"id": "51"}\n\n')
        assert events == [ServerSentEvent(data='{"id": "51"}', id="51")]

    def test_multiline_data_and_crlf(self):
        events = feed(EventStreamParser(), "data: a\r\ndata: b\r\n\r\n")
        assert events[0].data == "a\nb"

    def test_comments_and_empty_blocks_ignored(self):
        events = feed(EventStreamParser(), ": keepalive\n\n\nevent: open\n\n")
        assert events == []

    def test_named_event(self):
        events = feed(EventStreamParser(), "event: close\ndata: byebye\n\n")
        assert events[0].event == "close"
        assert events[0].data == "byebye"

    def test_id_and_retry_persist(self):
        parser = EventStreamParser()
        events = feed(parser, "retry: 1500\nid: 7\ndata: x\n\ndata: y\n\n")
        assert [e.id for e in events] == ["7", "7"]
        assert events[1].retry == 1.5
        assert parser.last_event_id == "7"

    def test_invalid_retry_ignored(self):
        events = feed(EventStreamParser(), "retry: soon\ndata: x\n\n")
        assert events[0].retry is None

    def test_value_without_space(self):
        events = feed(EventStreamParser(), "data:x\n\n")
        assert events[0].data == "x"

    def test_incomplete_block_not_dispatched(self):
        assert feed(EventStreamParser(), "data: partial\n") == []


class FakeContent:
    def __init__(self, lines, error=None):
        self._lines = lines
        self._error = error

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for line in self._lines:
            yield line
        if self._error is not None:
            raise self._error


class FakeClient:
    def __init__(self, lines=(), error=None, open_error=None):
        self.lines = list(lines)
        self.error = error
        self.open_error = open_error
        self.calls = []

    @asynccontextmanager
    async def open_stream(self, url, headers=None, idle_timeout=None):
        self.calls.append((url, idle_timeout))
        if self.open_error is not None:
            raise self.open_error

        class Response:
            content = FakeContent(self.lines, self.error)

        yield Response()


class TestEventStreamTransport:
    """Test connection handling and error mapping."""

    @pytest.mark.asyncio
    async def test_yields_events_until_end(self):
        client = FakeClient([b'data: "hello"\n', b"\n", b"id: 1\n", b'data: {"id": "1"}\n', b"\n"])
        transport = EventStreamTransport(client)

        events = [e async for e in transport.events("https://x/ledgers?cursor=now", idle_timeout=5)]

        assert [e.data for e in events] == ['"hello"', '{"id": "1"}']
        assert client.calls == [("https://x/ledgers?cursor=now", 5)]

    @pytest.mark.asyncio
    async def test_idle_timeout_is_transport_error(self):
        client = FakeClient([b"data: x\n", b"\n"], error=asyncio.TimeoutError())
        received = []
        with pytest.raises(TransportError, match="idle"):
            async for event in EventStreamTransport(client).events("https://x/", idle_timeout=1):
                received.append(event)
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_read_error_is_transport_error(self):
        client = FakeClient([], error=aiohttp.ClientPayloadError("reset"))
        with pytest.raises(TransportError) as exc_info:
            async for _ in EventStreamTransport(client).events("https://x/"):
                pass
        assert exc_info.value.url == "https://x/"

    @pytest.mark.asyncio
    async def test_server_error_propagates(self):
        client = FakeClient(open_error=NotFoundError("HTTP 404", status=404))
        with pytest.raises(NotFoundError):
            async for _ in EventStreamTransport(client).events("https://x/"):
                pass
