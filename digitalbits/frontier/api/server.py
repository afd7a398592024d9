"""Server facade handing out endpoint builders."""

from __future__ import annotations

import logging
from typing import Any

from ..core.config import ClientConfig
from ..core.exceptions import ConfigurationError, MalformedResponseError
from ..models.record import Record
from ..runtime.mapper import map_record
from ..utils.http import HTTPClient
from .call_builder import CallBuilder
from .endpoints import ENDPOINTS

logger = logging.getLogger(__name__)


class Server:
    """Entry point bound to one Frontier deployment.

    Owns the configuration and the shared HTTP client; every builder, record
    link and stream it produces reuses them. Use as an async context manager
    (or call ``close()``) to release the HTTP session.

    Example:
        >>> async with Server(ClientConfig.for_network(Network.TESTNET)) as server:
        ...     ledgers = await server.ledgers().order("desc").limit(1).call()
    """

    def __init__(
        self,
        config: ClientConfig | str,
        *,
        client: HTTPClient | None = None,
        **options: Any,
    ) -> None:
        if isinstance(config, str):
            config = ClientConfig(server_url=config, **options)
        elif options:
            raise ConfigurationError("Options are only accepted together with a server URL string")
        self.config = config
        self._client = client or HTTPClient(
            timeout=config.timeout, headers=config.request_headers()
        )

    @property
    def client(self) -> HTTPClient:
        return self._client

    def endpoint(self, name: str) -> CallBuilder:
        """Fresh builder for the named endpoint."""
        try:
            spec = ENDPOINTS[name]
        except KeyError:
            raise ConfigurationError(f"Unknown endpoint: {name!r}") from None
        return CallBuilder.for_endpoint(self.config.server_url, self._client, spec)

    def accounts(self) -> CallBuilder:
        return self.endpoint("accounts")

    def assets(self) -> CallBuilder:
        return self.endpoint("assets")

    def claimable_balances(self) -> CallBuilder:
        return self.endpoint("claimable_balances")

    def effects(self) -> CallBuilder:
        return self.endpoint("effects")

    def ledgers(self) -> CallBuilder:
        return self.endpoint("ledgers")

    def liquidity_pools(self) -> CallBuilder:
        return self.endpoint("liquidity_pools")

    def offers(self) -> CallBuilder:
        return self.endpoint("offers")

    def operations(self) -> CallBuilder:
        return self.endpoint("operations")

    def payments(self) -> CallBuilder:
        return self.endpoint("payments")

    def trades(self) -> CallBuilder:
        return self.endpoint("trades")

    def transactions(self) -> CallBuilder:
        return self.endpoint("transactions")

    async def root(self) -> Record:
        """Fetch the server's root resource (versions, network passphrase, links)."""
        body = await self._client.get(self.config.server_url)
        return map_record(body, self._client)

    async def load_account(self, account_id: str) -> Record:
        """Fetch one account record."""
        result = await self.accounts().record(account_id).call()
        if not isinstance(result, Record):
            raise MalformedResponseError("Account endpoint returned a collection", body=result.raw)
        return result

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> Server:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
