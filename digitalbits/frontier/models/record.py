"""Decoded resource record."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

if TYPE_CHECKING:
    from ..runtime.mapper import LinkFunction


class Record(BaseModel):
    """One resource (operation, transaction, account, ...) returned by Frontier.

    Data fields are kept as-is from the JSON body and are readable as
    attributes (``record.paging_token``, ``account.data``) or by key
    (``record["type"]``). The helper attributes ``fields``, ``links``,
    ``cursor`` and ``raw`` use names Frontier never returns as resource
    fields; key access always reads the server field.
    Hyperlinks become zero-argument awaitables in ``record.links``::

        tx = await record.links["transaction"]()

    Link functions hold only the link and the HTTP client, so a record stays
    usable after the builder that produced it is gone.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)
    _links: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: dict[str, Any], links: dict[str, LinkFunction]) -> Record:
        """Build a record from a raw JSON object and its link functions."""
        data = {key: value for key, value in raw.items() if not key.startswith("_")}
        record = cls.model_validate(data)
        record._raw = raw
        record._links = dict(links)
        return record

    @property
    def fields(self) -> dict[str, Any]:
        """Data fields of the resource (``_links``/``_embedded`` excluded)."""
        return dict(self.model_extra or {})

    @property
    def raw(self) -> dict[str, Any]:
        """The JSON object this record was mapped from."""
        return self._raw

    @property
    def links(self) -> Mapping[str, LinkFunction]:
        return MappingProxyType(self._links)

    @property
    def cursor(self) -> str | None:
        """Paging token used to resume pagination or streaming after this record."""
        token = (self.model_extra or {}).get("paging_token")
        return None if token is None else str(token)

    def __getitem__(self, key: str) -> Any:
        return (self.model_extra or {})[key]

    def get(self, key: str, default: Any = None) -> Any:
        return (self.model_extra or {}).get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in (self.model_extra or {})
