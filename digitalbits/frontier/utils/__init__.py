"""Utility functions."""

from .http import HTTPClient
from .xdr import decode_xdr, xdr_fields

__all__ = ["HTTPClient", "decode_xdr", "xdr_fields"]
