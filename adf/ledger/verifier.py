"""
Structural check of serialized transaction envelopes.
"""

from __future__ import annotations

from typing import Optional

from stellar_sdk import TransactionEnvelope

from adf.config.models import PUBLIC_NETWORK_PASSPHRASE
from adf.logging import get_logger

logger = get_logger(__name__)


def is_valid(xdr: str, network_passphrase: Optional[str] = None) -> bool:
    """
    Return True if ``xdr`` parses as a transaction envelope.

    Never raises: empty, truncated, or otherwise malformed input yields False.
    """
    if not isinstance(xdr, str) or not xdr.strip():
        return False
    try:
        TransactionEnvelope.from_xdr(xdr.strip(), network_passphrase or PUBLIC_NETWORK_PASSPHRASE)
    except Exception as exc:
        logger.debug(f"Envelope rejected: {exc}")
        return False
    return True
