"""Mapping of raw Frontier JSON into records and pages.

Mapping is a pure function of its input: no request is made while mapping.
Network access happens only when a produced link function is awaited, and the
result of that request is mapped by the same rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import MalformedResponseError
from ..models.link import Link
from ..models.page import Page
from ..models.record import Record
from ..utils.http import HTTPClient

# Links whose target the server may inline under the same key (join=transactions)
JOINABLE_LINKS = frozenset({"transaction"})


@dataclass(frozen=True)
class LinkFunction:
    """Zero-argument awaitable bound to one hyperlink.

    Captures only the link and the HTTP client. When the linked resource was
    embedded in the original response, ``embedded`` holds it and no request
    is made.
    """

    link: Link
    client: HTTPClient = field(repr=False)
    embedded: Record | None = field(default=None, repr=False)

    @property
    def href(self) -> str:
        return self.link.href

    async def __call__(self, **template_values: Any) -> Record | Page:
        """Resolve the link.

        Args:
            **template_values: Values for templated hrefs (e.g. ``cursor``,
                ``limit``, ``order``); ignored for plain links
        """
        if self.embedded is not None:
            return self.embedded
        body = await self.client.get(self.link.expand(**template_values))
        return map_response(body, self.client)


def _parse_links(raw_links: Any, body: Any) -> dict[str, Link]:
    if not isinstance(raw_links, dict):
        raise MalformedResponseError("'_links' must be an object", body=body)
    links: dict[str, Link] = {}
    for name, entry in raw_links.items():
        try:
            links[name] = Link.model_validate(entry)
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid link {name!r}", body=body) from e
    return links


def map_record(raw: Any, client: HTTPClient) -> Record:
    """Map one resource object into a Record with link functions."""
    if not isinstance(raw, dict):
        raise MalformedResponseError("Expected a JSON object for a record", body=raw)

    functions: dict[str, LinkFunction] = {}
    for name, link in _parse_links(raw.get("_links", {}), raw).items():
        embedded = None
        if name in JOINABLE_LINKS and isinstance(raw.get(name), dict):
            embedded = map_record(raw[name], client)
        functions[name] = LinkFunction(link=link, client=client, embedded=embedded)
    return Record.from_raw(raw, functions)


def map_page(raw: Any, client: HTTPClient) -> Page:
    """Map a collection envelope into a Page.

    Raises:
        MalformedResponseError: ``_embedded.records`` or ``_links`` missing
    """
    if not isinstance(raw, dict):
        raise MalformedResponseError("Expected a JSON object for a collection", body=raw)
    embedded = raw.get("_embedded")
    if not isinstance(embedded, dict) or not isinstance(embedded.get("records"), list):
        raise MalformedResponseError("Collection is missing '_embedded.records'", body=raw)
    if "_links" not in raw:
        raise MalformedResponseError("Collection is missing '_links'", body=raw)

    links = _parse_links(raw["_links"], raw)
    records = tuple(map_record(item, client) for item in embedded["records"])

    def navigation(name: str) -> LinkFunction | None:
        link = links.get(name)
        return LinkFunction(link=link, client=client) if link is not None else None

    return Page(
        records=records,
        raw=raw,
        next_link=navigation("next"),
        prev_link=navigation("prev"),
    )


def map_response(raw: Any, client: HTTPClient) -> Record | Page:
    """Map any response body: collection envelopes become Pages, the rest Records."""
    if isinstance(raw, dict) and "_embedded" in raw:
        return map_page(raw, client)
    return map_record(raw, client)
