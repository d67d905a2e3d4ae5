"""Signing URIs and the relay that hands them to a wallet."""

from __future__ import annotations

from .client import RelayClient, RelayError
from .sep7 import build_transaction_uri, is_stellar_uri, with_return_url

__all__ = [
    "RelayClient",
    "RelayError",
    "build_transaction_uri",
    "is_stellar_uri",
    "with_return_url",
]
