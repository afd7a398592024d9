"""Bridge between record fields and an external XDR decoder.

Fields whose name ends in ``_xdr`` hold base64-encoded XDR blobs. They are
kept unmodified on records; the structured type depends on the endpoint, so
decoding is left to a caller-supplied function.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from ..core.exceptions import MalformedResponseError

if TYPE_CHECKING:
    from ..models.record import Record

T = TypeVar("T")

XDR_SUFFIX = "_xdr"


def xdr_fields(record: Record) -> dict[str, str]:
    """Return the base64 XDR fields carried by a record."""
    return {
        name: value
        for name, value in record.fields.items()
        if name.endswith(XDR_SUFFIX) and isinstance(value, str)
    }


def decode_xdr(
    record: Record,
    field: str,
    decoder: Callable[[Any], T],
    *,
    raw: bool = False,
) -> T:
    """Decode one XDR field with ``decoder``.

    Args:
        record: Record holding the field
        field: Field name, e.g. ``"envelope_xdr"``
        decoder: External decoder; receives the base64 string, or bytes when
            ``raw`` is true
        raw: Base64-decode the blob before handing it to ``decoder``

    Raises:
        MalformedResponseError: Field missing, not a string, or invalid base64
    """
    value = record.fields.get(field)
    if not isinstance(value, str):
        raise MalformedResponseError(f"Record has no XDR field {field!r}", body=record.raw)
    if not raw:
        return decoder(value)
    try:
        blob = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedResponseError(f"Field {field!r} is not valid base64", body=value) from e
    return decoder(blob)
