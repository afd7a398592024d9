"""Collection page with link-driven navigation."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..core.exceptions import MalformedResponseError
from .record import Record

if TYPE_CHECKING:
    from ..runtime.mapper import LinkFunction


@dataclass(frozen=True)
class Page:
    """One batch of records plus forward/backward navigation.

    ``next()`` and ``prev()`` request the exact hrefs the server returned in
    ``_links``; the URL is never rebuilt client-side, so server-side filters
    and continuation state baked into the link are preserved.
    """

    records: tuple[Record, ...]
    raw: dict[str, Any] = field(repr=False, compare=False)
    next_link: LinkFunction | None = field(default=None, repr=False)
    prev_link: LinkFunction | None = field(default=None, repr=False)

    @property
    def has_next(self) -> bool:
        return self.next_link is not None

    @property
    def has_prev(self) -> bool:
        return self.prev_link is not None

    async def next(self) -> Page | None:
        """Fetch the following page, or None when the server gave no ``next`` link."""
        return await self._follow(self.next_link, "next")

    async def prev(self) -> Page | None:
        """Fetch the preceding page, or None when the server gave no ``prev`` link."""
        return await self._follow(self.prev_link, "prev")

    async def _follow(self, link: LinkFunction | None, name: str) -> Page | None:
        if link is None:
            return None
        result = await link()
        if not isinstance(result, Page):
            raise MalformedResponseError(
                f"Link {name!r} did not resolve to a collection", body=result.raw
            )
        return result

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]
