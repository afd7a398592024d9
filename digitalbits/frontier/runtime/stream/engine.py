"""Resumable streaming subscription.

A StreamSubscription owns one long-lived event-stream connection and the
cursor of the last delivered record. When the connection drops it reconnects
from that cursor with exponential backoff, so records are delivered
at-least-once: a record may repeat only if the connection dropped after the
server sent it but before the cursor advanced.

States::

    CONNECTING -> OPEN -> RECONNECTING -> OPEN ...
                       \\-> CLOSED (caller close() or non-retryable error)
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

from ...core.config import RetryPolicy
from ...core.enums import StreamState
from ...core.exceptions import (
    FrontierError,
    MalformedResponseError,
    RateLimitError,
    ServerError,
    TransportError,
)
from ...models.events import ConnectionEvent
from ...models.record import Record
from ..mapper import map_record
from .transport import EventStreamTransport, ServerSentEvent

if TYPE_CHECKING:
    from ...api.url_builder import UrlBuilder
    from ...utils.http import HTTPClient

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Record], Awaitable[None] | None]
ErrorHandler = Callable[[Exception], Awaitable[None] | None]
StatusHandler = Callable[[ConnectionEvent], Awaitable[None] | None]

CLOSE_EVENT = "close"


class StreamTransport(Protocol):
    def events(
        self, url: str, *, idle_timeout: float | None = None
    ) -> AsyncIterator[ServerSentEvent]: ...


class StreamSubscription:
    """Cursor-tracked subscription with automatic reconnection.

    Handlers may be plain functions or coroutine functions. ``on_message``
    receives each mapped Record in server cursor order. ``on_error`` receives
    malformed events (the stream keeps going) and the terminal error that
    closes the subscription. ``on_status`` receives a ConnectionEvent on every
    state change.

    The subscription is owned by its creator, who must call ``close()``.
    Nothing closes an abandoned subscription.
    """

    def __init__(
        self,
        url: UrlBuilder,
        client: HTTPClient,
        on_message: MessageHandler,
        *,
        on_error: ErrorHandler | None = None,
        on_status: StatusHandler | None = None,
        cursor: str | None = None,
        retry_policy: RetryPolicy | None = None,
        idle_timeout: float | None = None,
        transport: StreamTransport | None = None,
    ) -> None:
        self._url = url.clone()
        self._client = client
        self._on_message = on_message
        self._on_error = on_error
        self._on_status = on_status
        self._cursor = cursor
        self._policy = retry_policy or RetryPolicy()
        self._idle_timeout = idle_timeout
        self._transport = transport or EventStreamTransport(client)

        self._state = StreamState.CONNECTING
        self._attempt = 0
        self._server_retry: float | None = None
        # Set by close(); once true no handler is invoked again
        self._stopped = False
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def cursor(self) -> str | None:
        """Cursor of the last delivered record (or the starting cursor)."""
        return self._cursor

    @property
    def attempt(self) -> int:
        """Consecutive failed connection attempts since the last good event."""
        return self._attempt

    @property
    def closed(self) -> bool:
        return self._state is StreamState.CLOSED

    @property
    def url(self) -> str:
        """URL the next (re)connect will use."""
        if self._cursor is None:
            return self._url.build()
        return self._url.build({"cursor": self._cursor})

    # ----------------------
    # Lifecycle
    # ----------------------
    def start(self) -> StreamSubscription:
        """Schedule the connection loop on the running event loop."""
        if self._task is not None:
            return self
        if self._stopped:
            raise RuntimeError("Cannot start a closed subscription")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        return self

    async def close(self) -> None:
        """Stop the subscription.

        No handler is invoked once this method has been entered, including for
        events already received from the network. When it returns the
        connection is torn down. Safe to call more than once.
        """
        self._stopped = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            if task is not asyncio.current_task():
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        if self._state is not StreamState.CLOSED:
            self._state = StreamState.CLOSED
            logger.info("Stream closed by caller", extra={"url": self.url, "cursor": self._cursor})

    async def wait_closed(self) -> None:
        """Wait until the subscription reaches the CLOSED state."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def __aenter__(self) -> StreamSubscription:
        return self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ----------------------
    # Internals
    # ----------------------
    async def _run(self) -> None:
        try:
            while not self._stopped:
                error = await self._connect_once()
                if self._stopped:
                    return
                if error is not None and not self._is_retryable(error):
                    await self._terminate(error)
                    return

                self._attempt += 1
                if self._policy.exhausted(self._attempt):
                    if error is None:
                        error = TransportError(
                            f"Stream ended {self._attempt} times without delivering an event",
                            url=self.url,
                        )
                    await self._terminate(error)
                    return

                delay = self._policy.delay(self._attempt, floor=self._retry_floor(error))
                logger.warning(
                    "Stream disconnected, reconnecting",
                    extra={
                        "url": self.url,
                        "cursor": self._cursor,
                        "attempt": self._attempt,
                        "delay": round(delay, 2),
                        "error": str(error) if error else "end of stream",
                    },
                )
                await self._set_state(StreamState.RECONNECTING, error)
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("Stream loop failed unexpectedly")
            await self._terminate(e)

    async def _connect_once(self) -> FrontierError | None:
        """Run one connection; return the error that ended it, or None on a clean end."""
        url = self.url
        logger.debug("Connecting stream", extra={"url": url})
        try:
            async with contextlib.aclosing(
                self._transport.events(url, idle_timeout=self._idle_timeout)
            ) as events:
                async for event in events:
                    if self._stopped:
                        return None
                    if self._state is not StreamState.OPEN:
                        logger.info("Stream open", extra={"url": url, "cursor": self._cursor})
                        await self._set_state(StreamState.OPEN)
                    if event.retry is not None:
                        self._server_retry = event.retry
                    if event.event == CLOSE_EVENT:
                        logger.debug("Server requested stream close")
                        return None
                    await self._handle_event(event)
        except FrontierError as e:
            return e
        return None

    async def _handle_event(self, event: ServerSentEvent) -> None:
        try:
            payload = json.loads(event.data)
        except ValueError as e:
            error = MalformedResponseError("Stream event is not valid JSON", body=event.data)
            error.__cause__ = e
            await self._report(error)
            return

        self._attempt = 0
        if not isinstance(payload, dict):
            # Frontier greets each connection with a bare "hello" string
            logger.debug("Ignoring non-record stream event", extra={"payload": payload})
            return

        try:
            record = map_record(payload, self._client)
        except MalformedResponseError as e:
            await self._report(e)
            return

        self._advance(record.cursor or event.id)
        if self._stopped:
            return
        await self._invoke(self._on_message, record)

    def _advance(self, cursor: str | None) -> None:
        if cursor is None:
            return
        previous = self._cursor
        if previous is not None and previous.isdigit() and cursor.isdigit():
            if int(cursor) <= int(previous):
                logger.warning(
                    "Stream cursor did not increase",
                    extra={"url": self._url.build(), "previous": previous, "cursor": cursor},
                )
        self._cursor = cursor

    def _is_retryable(self, error: Exception) -> bool:
        if isinstance(error, TransportError):
            return True
        if isinstance(error, ServerError):
            return error.retryable
        return False

    def _retry_floor(self, error: Exception | None) -> float | None:
        floors = [self._server_retry]
        if isinstance(error, RateLimitError):
            floors.append(error.retry_after)
        present = [f for f in floors if f is not None]
        return max(present) if present else None

    async def _terminate(self, error: Exception) -> None:
        logger.error(
            "Stream closed",
            extra={
                "url": self.url,
                "cursor": self._cursor,
                "attempt": self._attempt,
                "error": str(error),
            },
        )
        await self._report(error)
        await self._set_state(StreamState.CLOSED, error)

    async def _report(self, error: Exception) -> None:
        if self._on_error is None:
            logger.error("Unhandled stream error", extra={"url": self.url, "error": str(error)})
            return
        await self._invoke(self._on_error, error)

    async def _set_state(self, state: StreamState, error: Exception | None = None) -> None:
        self._state = state
        await self._invoke(
            self._on_status,
            ConnectionEvent(
                state=state,
                url=self.url,
                cursor=self._cursor,
                attempt=self._attempt,
                error=error,
            ),
        )

    async def _invoke(self, handler: Callable[[Any], Any] | None, arg: Any) -> None:
        if handler is None or self._stopped:
            return
        try:
            result = handler(arg)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                "Error in stream handler",
                extra={"handler": getattr(handler, "__name__", repr(handler)), "error": str(e)},
            )
