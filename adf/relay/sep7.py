"""
SEP-0007 transaction URIs.

Builds ``web+stellar:tx?xdr=...`` links that a wallet opens to sign the
assembled envelope.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from stellar_sdk import TransactionEnvelope
from stellar_sdk.sep.stellar_uri import TransactionStellarUri

from adf.config.models import PUBLIC_NETWORK_PASSPHRASE

URI_SCHEME = "web+stellar:"


def build_transaction_uri(
    xdr: str,
    *,
    network_passphrase: Optional[str] = None,
    msg: Optional[str] = None,
    callback: Optional[str] = None,
    origin_domain: Optional[str] = None,
    return_url: Optional[str] = None,
    pubkey: Optional[str] = None,
) -> str:
    """
    Build a ``tx`` URI for an unsigned envelope.

    Empty optional parameters are left out of the URI.

    Raises:
        ValueError: If ``xdr`` is empty or does not parse as an envelope.
    """
    if not xdr or not xdr.strip():
        raise ValueError("An envelope XDR is required to build a transaction URI")

    try:
        envelope = TransactionEnvelope.from_xdr(xdr.strip(), network_passphrase or PUBLIC_NETWORK_PASSPHRASE)
    except Exception as exc:
        raise ValueError(f"Not a transaction envelope: {exc}") from exc

    uri = TransactionStellarUri(
        transaction_envelope=envelope,
        callback=callback or None,
        pubkey=pubkey or None,
        message=msg or None,
        network_passphrase=network_passphrase or None,
        origin_domain=origin_domain or None,
    ).to_uri()
    return with_return_url(uri, return_url)


def is_stellar_uri(uri: str) -> bool:
    return isinstance(uri, str) and uri.startswith(URI_SCHEME)


def parse_uri_params(uri: str) -> dict[str, str]:
    """Query parameters of a ``web+stellar:`` URI."""
    return dict(parse_qsl(urlsplit(uri).query, keep_blank_values=True))


def with_return_url(uri: str, return_url: Optional[str]) -> str:
    """Append ``return_url`` unless the URI already has one."""
    if not return_url or "return_url" in parse_uri_params(uri):
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{urlencode({'return_url': return_url})}"
