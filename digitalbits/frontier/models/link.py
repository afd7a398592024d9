"""Hyperlink model for ``_links`` entries."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict, Field

_TEMPLATE_EXPRESSION = re.compile(r"\{([?&/]?)([^}]*)\}")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class Link(BaseModel):
    """One entry of a resource's ``_links`` map.

    Templated hrefs use the RFC 6570 subset Frontier emits: simple
    ``{var}``, path ``{/var}`` and form-style ``{?a,b}`` / ``{&a,b}``
    expressions. Variables without a value are dropped on expansion.
    """

    href: str = Field(..., min_length=1)
    templated: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")

    def expand(self, **values: Any) -> str:
        """Return the concrete URL for this link."""
        if not self.templated:
            return self.href

        def replace(match: re.Match[str]) -> str:
            operator = match.group(1)
            names = [name.strip() for name in match.group(2).split(",") if name.strip()]
            present = [(name, _stringify(values[name])) for name in names if values.get(name) is not None]
            if not present:
                return ""
            if operator in ("?", "&"):
                return operator + urlencode(present)
            if operator == "/":
                return "".join("/" + quote(value, safe="") for _, value in present)
            return ",".join(quote(value, safe="") for _, value in present)

        return _TEMPLATE_EXPRESSION.sub(replace, self.href)
