"""Request building API."""

from .call_builder import CallBuilder
from .endpoints import ENDPOINTS, EndpointSpec, FilterSpec
from .server import Server
from .url_builder import UrlBuilder

__all__ = [
    "CallBuilder",
    "ENDPOINTS",
    "EndpointSpec",
    "FilterSpec",
    "Server",
    "UrlBuilder",
]
