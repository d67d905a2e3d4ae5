"""
Signing relay configuration model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_RELAY_ENDPOINT, DEFAULT_RELAY_TIMEOUT, DEFAULT_URI_MESSAGE


@dataclass
class RelayConfig:
    """Settings for the signing-URI relay and the URIs sent to it."""

    endpoint: str = DEFAULT_RELAY_ENDPOINT
    """URL receiving ``{"uri": ...}`` POSTs."""

    timeout: float = DEFAULT_RELAY_TIMEOUT
    """HTTP timeout for relay requests, in seconds."""

    return_url: Optional[str] = None
    """URL the wallet returns to after signing; added to URIs that lack one."""

    message: str = DEFAULT_URI_MESSAGE
    """Text shown to the signer (``msg`` URI parameter)."""

    def validate(self) -> None:
        if not str(self.endpoint or "").startswith(("http://", "https://")):
            raise ValueError(f"relay.endpoint must be an http(s) URL, got '{self.endpoint}'")
        if self.timeout <= 0:
            raise ValueError(f"relay.timeout must be positive, got {self.timeout}")
        if len(self.message or "") > 300:
            raise ValueError("relay.message must not exceed 300 characters")
