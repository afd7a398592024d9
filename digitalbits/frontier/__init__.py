"""DigitalBits Frontier - async query and streaming client for the Frontier API."""

from .api import ENDPOINTS, CallBuilder, EndpointSpec, FilterSpec, Server, UrlBuilder
from .core import (
    BadRequestError,
    ClientConfig,
    ConfigurationError,
    FrontierError,
    MalformedResponseError,
    Network,
    NotFoundError,
    Order,
    RateLimitError,
    RetryPolicy,
    ServerError,
    StreamState,
    TransportError,
)
from .models import ConnectionEvent, Link, Page, Record
from .runtime import LinkFunction, StreamSubscription, map_page, map_record, map_response
from .utils import HTTPClient, decode_xdr, xdr_fields

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ClientConfig",
    "RetryPolicy",
    "Network",
    "Order",
    "StreamState",
    # Builders
    "Server",
    "CallBuilder",
    "UrlBuilder",
    "EndpointSpec",
    "FilterSpec",
    "ENDPOINTS",
    # Models
    "Record",
    "Page",
    "Link",
    "ConnectionEvent",
    # Runtime
    "LinkFunction",
    "StreamSubscription",
    "map_record",
    "map_page",
    "map_response",
    "HTTPClient",
    # XDR bridge
    "decode_xdr",
    "xdr_fields",
    # Exceptions
    "FrontierError",
    "ConfigurationError",
    "TransportError",
    "ServerError",
    "BadRequestError",
    "NotFoundError",
    "RateLimitError",
    "MalformedResponseError",
]
