"""Endpoint definitions for Frontier resources.

Each resource is described by data rather than by a builder subclass: the
path segment that identifies it, the scoping filters it accepts, the query
flags it understands, and whether it can be streamed or addressed by id.
CallBuilder reads these records to validate configuration before anything
reaches the network.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..core.exceptions import ConfigurationError

DEFAULT_MAX_LIMIT = 200
NOW = "now"


@dataclass(frozen=True)
class FilterSpec:
    """Scoping filter: a path template where ``{}`` is replaced by the value."""

    template: tuple[str, ...]

    def path(self, value: Any) -> tuple[str, ...]:
        value = str(value)
        if not value:
            raise ConfigurationError("Filter value must be non-empty")
        return tuple(value if part == "{}" else part for part in self.template)


@dataclass(frozen=True)
class EndpointSpec:
    name: str
    segments: tuple[str, ...]
    filters: Mapping[str, FilterSpec] = field(default_factory=dict)
    flags: frozenset[str] = frozenset()
    single: bool = False
    streamable: bool = False
    default_stream_cursor: str | None = NOW
    max_limit: int = DEFAULT_MAX_LIMIT

    def filter_spec(self, name: str) -> FilterSpec:
        try:
            return self.filters[name]
        except KeyError:
            supported = ", ".join(sorted(self.filters)) or "none"
            raise ConfigurationError(
                f"Endpoint '{self.name}' cannot be filtered by '{name}' (supported: {supported})"
            ) from None

    def check_flag(self, name: str) -> None:
        if name not in self.flags:
            supported = ", ".join(sorted(self.flags)) or "none"
            raise ConfigurationError(
                f"Endpoint '{self.name}' does not accept '{name}' (supported: {supported})"
            )

    def for_single_resource(self) -> EndpointSpec:
        """Spec for ``<segments>/<id>``: no scoping filters, no default stream cursor."""
        return replace(
            self,
            name=f"{self.name}_single",
            filters={},
            single=False,
            default_stream_cursor=None,
        )


def _scoped(resource: str, *scopes: str) -> dict[str, FilterSpec]:
    """Filters of the form ``<scope plural>/<id>/<resource>``."""
    return {scope: FilterSpec((f"{scope}s", "{}", resource)) for scope in scopes}


ACCOUNTS = EndpointSpec(
    name="accounts",
    segments=("accounts",),
    flags=frozenset({"signer", "sponsor", "asset", "liquidity_pool"}),
    single=True,
    streamable=True,
    default_stream_cursor=None,
)

ASSETS = EndpointSpec(
    name="assets",
    segments=("assets",),
    flags=frozenset({"asset_code", "asset_issuer"}),
)

CLAIMABLE_BALANCES = EndpointSpec(
    name="claimable_balances",
    segments=("claimable_balances",),
    flags=frozenset({"sponsor", "claimant", "asset"}),
    single=True,
)

EFFECTS = EndpointSpec(
    name="effects",
    segments=("effects",),
    filters=_scoped("effects", "account", "ledger", "transaction", "operation", "liquidity_pool"),
    streamable=True,
)

LEDGERS = EndpointSpec(
    name="ledgers",
    segments=("ledgers",),
    single=True,
    streamable=True,
)

LIQUIDITY_POOLS = EndpointSpec(
    name="liquidity_pools",
    segments=("liquidity_pools",),
    flags=frozenset({"reserves", "account"}),
    single=True,
)

OFFERS = EndpointSpec(
    name="offers",
    segments=("offers",),
    filters=_scoped("offers", "account"),
    flags=frozenset({"seller", "selling", "buying", "sponsor"}),
    single=True,
    streamable=True,
)

OPERATIONS = EndpointSpec(
    name="operations",
    segments=("operations",),
    filters=_scoped(
        "operations", "account", "claimable_balance", "ledger", "transaction", "liquidity_pool"
    ),
    flags=frozenset({"include_failed", "join"}),
    single=True,
    streamable=True,
)

PAYMENTS = EndpointSpec(
    name="payments",
    segments=("payments",),
    filters=_scoped("payments", "account", "ledger", "transaction"),
    flags=frozenset({"include_failed", "join"}),
    streamable=True,
)

TRADES = EndpointSpec(
    name="trades",
    segments=("trades",),
    filters=_scoped("trades", "account", "liquidity_pool", "offer"),
    flags=frozenset(
        {
            "base_asset_type",
            "base_asset_code",
            "base_asset_issuer",
            "counter_asset_type",
            "counter_asset_code",
            "counter_asset_issuer",
            "trade_type",
        }
    ),
    streamable=True,
)

TRANSACTIONS = EndpointSpec(
    name="transactions",
    segments=("transactions",),
    filters=_scoped("transactions", "account", "claimable_balance", "ledger", "liquidity_pool"),
    flags=frozenset({"include_failed"}),
    single=True,
    streamable=True,
)

ENDPOINTS: dict[str, EndpointSpec] = {
    spec.name: spec
    for spec in (
        ACCOUNTS,
        ASSETS,
        CLAIMABLE_BALANCES,
        EFFECTS,
        LEDGERS,
        LIQUIDITY_POOLS,
        OFFERS,
        OPERATIONS,
        PAYMENTS,
        TRADES,
        TRANSACTIONS,
    )
}
