"""Streaming runtime: event-stream transport and resumable subscriptions."""

from .engine import StreamSubscription, StreamTransport
from .transport import EventStreamParser, EventStreamTransport, ServerSentEvent

__all__ = [
    "StreamSubscription",
    "StreamTransport",
    "EventStreamParser",
    "EventStreamTransport",
    "ServerSentEvent",
]
