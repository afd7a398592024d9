"""Runtime components: response mapping and streaming."""

from .mapper import JOINABLE_LINKS, LinkFunction, map_page, map_record, map_response
from .stream import EventStreamTransport, StreamSubscription

__all__ = [
    "JOINABLE_LINKS",
    "LinkFunction",
    "map_page",
    "map_record",
    "map_response",
    "EventStreamTransport",
    "StreamSubscription",
]
