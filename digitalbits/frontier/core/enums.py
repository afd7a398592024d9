"""Core enumerations."""

from __future__ import annotations

from enum import Enum


class Order(str, Enum):
    """Record ordering accepted by collection endpoints."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_value(cls, value: Order | str) -> Order:
        """Coerce a string or Order into an Order.

        Raises:
            ValueError: If value is not a recognised order
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ValueError(f"Invalid order: {value!r}. Must be one of: asc, desc")


class StreamState(str, Enum):
    """Lifecycle states of a streaming subscription."""

    CONNECTING = "connecting"
    OPEN = "open"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class Network(str, Enum):
    """Public Frontier deployments."""

    LIVENET = "livenet"
    TESTNET = "testnet"

    @property
    def server_url(self) -> str:
        return NETWORK_SERVER_URLS[self]


NETWORK_SERVER_URLS = {
    Network.LIVENET: "https://frontier.livenet.digitalbits.io",
    Network.TESTNET: "https://frontier.testnet.digitalbits.io",
}
