"""
Top-level configuration model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .network import NetworkConfig
from .relay import RelayConfig


@dataclass
class ADFConfig:
    """
    Complete configuration passed explicitly to every entry point.
    """

    network: NetworkConfig = field(default_factory=NetworkConfig)
    """Ledger network settings."""

    relay: RelayConfig = field(default_factory=RelayConfig)
    """Signing relay settings."""

    config_path: Optional[Path] = None
    """File the configuration was loaded from, if any."""

    def validate(self) -> None:
        self.network.validate()
        self.relay.validate()
