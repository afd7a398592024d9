"""Core components."""

from .config import ClientConfig, RetryPolicy
from .enums import Network, Order, StreamState
from .exceptions import (
    BadRequestError,
    ConfigurationError,
    FrontierError,
    MalformedResponseError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    server_error_for,
)

__all__ = [
    "ClientConfig",
    "RetryPolicy",
    "Network",
    "Order",
    "StreamState",
    "FrontierError",
    "ConfigurationError",
    "TransportError",
    "ServerError",
    "BadRequestError",
    "NotFoundError",
    "RateLimitError",
    "MalformedResponseError",
    "server_error_for",
]
