"""
Ledger network configuration model.

Selects the Horizon server and network passphrase, plus the fee and validity
window applied to assembled transactions.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_BASE_FEE,
    DEFAULT_NETWORK_TYPE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TIMEOUT_SECONDS,
    NETWORK_TYPES,
)


@dataclass
class NetworkConfig:
    """
    Configuration for talking to a Stellar network.

    ``horizon_url`` and ``network_passphrase`` are derived from
    ``network_type`` unless given explicitly.
    """

    network_type: Optional[str] = None
    """Either 'PUBLIC' or 'TESTNET'. Falls back to ADF_NETWORK_TYPE, then PUBLIC."""

    horizon_url: Optional[str] = None
    """Horizon base URL. Falls back to ADF_HORIZON_URL, then the network default."""

    network_passphrase: Optional[str] = None
    """Network passphrase used when building and parsing envelopes."""

    base_fee: int = DEFAULT_BASE_FEE
    """Fee per operation, in stroops."""

    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    """Validity window for assembled transactions. 0 means no expiry."""

    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    """HTTP timeout for Horizon requests, in seconds."""

    def __post_init__(self) -> None:
        if not self.network_type:
            self.network_type = os.environ.get("ADF_NETWORK_TYPE") or DEFAULT_NETWORK_TYPE
        self.network_type = str(self.network_type).strip().upper()

        default_url, default_passphrase = NETWORK_TYPES.get(
            self.network_type, NETWORK_TYPES[DEFAULT_NETWORK_TYPE]
        )
        if not self.horizon_url:
            self.horizon_url = os.environ.get("ADF_HORIZON_URL") or default_url
        self.horizon_url = str(self.horizon_url).rstrip("/")

        if not self.network_passphrase:
            self.network_passphrase = default_passphrase

    @property
    def has_expiry(self) -> bool:
        return self.timeout_seconds > 0

    def validate(self) -> None:
        """Validate network configuration.

        Raises:
            ValueError: If any field has an invalid value.
        """
        if self.network_type not in NETWORK_TYPES:
            raise ValueError(
                f"network_type must be one of {sorted(NETWORK_TYPES)}, got '{self.network_type}'"
            )
        if not self.horizon_url.startswith(("http://", "https://")):
            raise ValueError(f"horizon_url must be an http(s) URL, got '{self.horizon_url}'")
        if self.base_fee < 100:
            raise ValueError(f"base_fee must be at least 100 stroops, got {self.base_fee}")
        if self.timeout_seconds < 0:
            raise ValueError(f"timeout_seconds must be >= 0, got {self.timeout_seconds}")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")
