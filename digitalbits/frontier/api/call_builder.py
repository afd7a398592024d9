"""Fluent request builder for Frontier endpoints.

One CallBuilder type serves every resource; the endpoint-specific knowledge
(path segment, legal filters and flags) comes from an EndpointSpec record.

Example:
    >>> page = await (server.operations()
    ...     .for_account("GDGQVOKHW4VEJRU2TETD6DBRKEO5ERCNF353LW5WBFW3JJWQ2BRQ6KDD")
    ...     .limit(10)
    ...     .order("desc")
    ...     .call())
    >>> older = await page.next()

Configuration errors are raised by the setter that causes them, so nothing
invalid is ever sent to the server.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

from ..core.config import RetryPolicy
from ..core.enums import Order
from ..core.exceptions import ConfigurationError, MalformedResponseError
from ..models.page import Page
from ..models.record import Record
from ..runtime.mapper import map_response
from ..runtime.stream.engine import (
    ErrorHandler,
    MessageHandler,
    StatusHandler,
    StreamSubscription,
    StreamTransport,
)
from ..utils.http import HTTPClient
from .endpoints import EndpointSpec
from .url_builder import UrlBuilder

logger = logging.getLogger(__name__)


class CallBuilder:
    """Builds, executes, pages and streams requests for one endpoint.

    A builder can be reused: ``call()`` snapshots the URL when invoked, so
    later changes never affect a request already issued.
    """

    def __init__(self, url: UrlBuilder, client: HTTPClient, spec: EndpointSpec) -> None:
        self.url = url
        self._client = client
        self._spec = spec

    @classmethod
    def for_endpoint(cls, base_url: str, client: HTTPClient, spec: EndpointSpec) -> CallBuilder:
        """Create a builder for ``spec`` rooted at ``base_url``."""
        return cls(UrlBuilder(base_url).segment(*spec.segments), client, spec)

    @property
    def spec(self) -> EndpointSpec:
        return self._spec

    def build_url(self) -> str:
        return self.url.build()

    # --- Paging parameters ---------------------------------------------------

    def cursor(self, cursor: str | int) -> CallBuilder:
        """Start after the record with this paging token (``"now"`` for streams)."""
        value = str(cursor)
        if not value:
            raise ConfigurationError("cursor must be non-empty")
        self.url.set_query("cursor", value)
        return self

    def limit(self, number: int) -> CallBuilder:
        """Maximum records per page.

        Raises:
            ConfigurationError: Not an integer within ``1..spec.max_limit``
        """
        if isinstance(number, bool) or not isinstance(number, int):
            raise ConfigurationError(f"limit must be an integer, got {number!r}")
        if not 1 <= number <= self._spec.max_limit:
            raise ConfigurationError(
                f"limit must be between 1 and {self._spec.max_limit}, got {number}"
            )
        self.url.set_query("limit", number)
        return self

    def order(self, direction: Order | str) -> CallBuilder:
        """Sort order: ``"asc"`` (default on the server) or ``"desc"``."""
        try:
            value = Order.from_value(direction)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self.url.set_query("order", value)
        return self

    # --- Filters ------------------------------------------------------------

    def scope(self, name: str, value: Any) -> CallBuilder:
        """Scope the request by a filter the endpoint supports.

        Raises:
            ConfigurationError: Unsupported filter, or a filter is already set
        """
        self.url.push_filter(self._spec.filter_spec(name).path(value))
        return self

    def for_account(self, account_id: str) -> CallBuilder:
        return self.scope("account", account_id)

    def for_ledger(self, sequence: int | str) -> CallBuilder:
        return self.scope("ledger", sequence)

    def for_transaction(self, transaction_id: str) -> CallBuilder:
        return self.scope("transaction", transaction_id)

    def for_operation(self, operation_id: str) -> CallBuilder:
        return self.scope("operation", operation_id)

    def for_claimable_balance(self, claimable_balance_id: str) -> CallBuilder:
        return self.scope("claimable_balance", claimable_balance_id)

    def for_liquidity_pool(self, liquidity_pool_id: str) -> CallBuilder:
        return self.scope("liquidity_pool", liquidity_pool_id)

    def for_offer(self, offer_id: str | int) -> CallBuilder:
        return self.scope("offer", offer_id)

    # --- Endpoint flags -----------------------------------------------------

    def param(self, name: str, value: Any) -> CallBuilder:
        """Set an endpoint-specific query flag after checking the endpoint accepts it."""
        self._spec.check_flag(name)
        self.url.set_query(name, value)
        return self

    def include_failed(self, value: bool) -> CallBuilder:
        """Include records from failed transactions (successful only by default)."""
        return self.param("include_failed", bool(value))

    def join(self, include: str) -> CallBuilder:
        """Inline related resources, e.g. ``join("transactions")`` on operations."""
        return self.param("join", include)

    # --- Single resource ----------------------------------------------------

    def record(self, resource_id: str | int) -> CallBuilder:
        """Builder for one resource by id; this builder is left unchanged.

        Raises:
            ConfigurationError: Endpoint has no single-resource form
        """
        if not self._spec.single:
            raise ConfigurationError(f"Endpoint '{self._spec.name}' has no single-resource form")
        return CallBuilder(
            self.url.resource(resource_id), self._client, self._spec.for_single_resource()
        )

    # --- Execution ----------------------------------------------------------

    async def call(self) -> Record | Page:
        """Issue one GET and map the response.

        Returns:
            A Page for collection endpoints, a Record for single resources

        Raises:
            TransportError, ServerError, MalformedResponseError
        """
        url = self.url.build()
        body = await self._client.get(url)
        return map_response(body, self._client)

    async def iter_pages(self, max_pages: int | None = None) -> AsyncIterator[Page]:
        """Lazily yield pages by following each page's ``next`` link.

        Stops at the first empty page, when the server gives no ``next`` link,
        or after ``max_pages`` pages.
        """
        if max_pages is not None and max_pages < 1:
            raise ConfigurationError("max_pages must be >= 1")
        page = await self.call()
        if not isinstance(page, Page):
            raise MalformedResponseError("Endpoint did not return a collection", body=page.raw)

        fetched = 0
        while page is not None and len(page) > 0:
            yield page
            fetched += 1
            if max_pages is not None and fetched >= max_pages:
                return
            page = await page.next()

    async def iter_records(self, max_pages: int | None = None) -> AsyncIterator[Record]:
        """Yield records across pages (see ``iter_pages``)."""
        async for page in self.iter_pages(max_pages=max_pages):
            for record in page:
                yield record

    def stream(
        self,
        on_message: MessageHandler,
        *,
        on_error: ErrorHandler | None = None,
        on_status: StatusHandler | None = None,
        retry_policy: RetryPolicy | None = None,
        idle_timeout: float | None = None,
        transport: StreamTransport | None = None,
    ) -> StreamSubscription:
        """Start a live subscription on the running event loop.

        The stream uses the same filters and parameters as ``call()``. It
        starts from the cursor set with ``cursor()``, or from the endpoint's
        default (``"now"`` for event collections).

        Returns:
            The started StreamSubscription; the caller must ``close()`` it

        Raises:
            ConfigurationError: Endpoint cannot be streamed
        """
        if not self._spec.streamable:
            raise ConfigurationError(f"Endpoint '{self._spec.name}' does not support streaming")
        cursor = self.url.query.get("cursor", self._spec.default_stream_cursor)
        subscription = StreamSubscription(
            self.url,
            self._client,
            on_message,
            on_error=on_error,
            on_status=on_status,
            cursor=cursor,
            retry_policy=retry_policy,
            idle_timeout=idle_timeout,
            transport=transport,
        )
        logger.debug("Starting stream", extra={"endpoint": self._spec.name, "cursor": cursor})
        return subscription.start()

    def __repr__(self) -> str:
        return f"CallBuilder({self._spec.name!r}, {self.url.build()!r})"
