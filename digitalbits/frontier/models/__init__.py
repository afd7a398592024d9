"""Data models for Frontier responses.

Records are frozen Pydantic v2 models that keep the server's JSON fields
verbatim and carry link functions for related resources. Pages are frozen
dataclasses holding a batch of records plus link-driven navigation.
"""

from .events import ConnectionEvent
from .link import Link
from .page import Page
from .record import Record

__all__ = [
    "ConnectionEvent",
    "Link",
    "Page",
    "Record",
]
