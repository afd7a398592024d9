"""URL composition for Frontier requests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, urlencode, urlsplit

from ..core.exceptions import ConfigurationError


def query_value(value: Any) -> str:
    """Serialize a query parameter value the way Frontier expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class UrlBuilder:
    """Base URL plus endpoint segments, a single filter path and a query bag.

    The endpoint segments identify the resource (``operations``). A filter
    path scopes the request (``accounts/<id>/operations``) and, when set,
    replaces the endpoint segments because it names the resource itself. Only
    one filter may be active: the server defines a single resource path per
    request.

    ``build()`` is a pure function of this state: query keys are emitted
    sorted, so the order in which parameters were set never changes the URL.
    """

    def __init__(self, base_url: str) -> None:
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ConfigurationError(f"Invalid base URL: {base_url!r}")
        self._origin = f"{parts.scheme}://{parts.netloc}"
        self._base_segments: tuple[str, ...] = tuple(s for s in parts.path.split("/") if s)
        self._segments: list[str] = []
        self._filter: tuple[str, ...] | None = None
        self._query: dict[str, str] = {}

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self._segments)

    @property
    def filter(self) -> tuple[str, ...] | None:
        return self._filter

    @property
    def query(self) -> Mapping[str, str]:
        return MappingProxyType(self._query)

    def segment(self, *names: str) -> UrlBuilder:
        """Append literal endpoint segments."""
        for name in names:
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Invalid path segment: {name!r}")
            self._segments.append(name)
        return self

    def push_filter(self, segments: Iterable[Any]) -> UrlBuilder:
        """Install the filter path.

        Raises:
            ConfigurationError: A filter is already set, or a segment is empty
        """
        path = tuple(str(s) for s in segments)
        if not path or any(not s for s in path):
            raise ConfigurationError(f"Invalid filter path: {path!r}")
        if self._filter is not None:
            raise ConfigurationError("Too many filters specified", details=[self._filter, path])
        self._filter = path
        return self

    def set_query(self, key: str, value: Any) -> UrlBuilder:
        """Set a query parameter, overwriting any previous value."""
        if not key:
            raise ConfigurationError("Query parameter name must be non-empty")
        self._query[key] = query_value(value)
        return self

    def remove_query(self, key: str) -> UrlBuilder:
        self._query.pop(key, None)
        return self

    def clone(self) -> UrlBuilder:
        """Independent copy; changes to either side do not affect the other."""
        twin = UrlBuilder.__new__(UrlBuilder)
        twin._origin = self._origin
        twin._base_segments = self._base_segments
        twin._segments = list(self._segments)
        twin._filter = self._filter
        twin._query = dict(self._query)
        return twin

    def resource(self, resource_id: Any) -> UrlBuilder:
        """Clone addressing a single resource of this endpoint by id."""
        twin = self.clone()
        twin._filter = None
        return twin.segment(str(resource_id))

    def path(self) -> str:
        parts = self._base_segments + (self._filter if self._filter else tuple(self._segments))
        return "/" + "/".join(quote(part, safe="") for part in parts)

    def build(self, extra_query: Mapping[str, Any] | None = None) -> str:
        """Return the final URL.

        Args:
            extra_query: Parameters applied on top of the stored query for this
                build only (e.g. the stream cursor on reconnect)
        """
        query = dict(self._query)
        if extra_query:
            query.update({key: query_value(value) for key, value in extra_query.items()})
        url = self._origin + self.path()
        if query:
            url += "?" + urlencode(sorted(query.items()), quote_via=quote)
        return url

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"UrlBuilder({self.build()!r})"
