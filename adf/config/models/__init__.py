"""
Configuration data models for Account Data Forms.

This package provides typed dataclasses for configuration options and defaults.
"""

from .constants import (
    DEFAULT_BASE_FEE,
    DEFAULT_NETWORK_TYPE,
    DEFAULT_RELAY_ENDPOINT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TIMEOUT_SECONDS,
    NETWORK_TYPES,
    PUBLIC_HORIZON_URL,
    PUBLIC_NETWORK_PASSPHRASE,
    TESTNET_HORIZON_URL,
    TESTNET_NETWORK_PASSPHRASE,
)
from .network import NetworkConfig
from .relay import RelayConfig
from .adf_config import ADFConfig

__all__ = [
    "ADFConfig",
    "NetworkConfig",
    "RelayConfig",
    "DEFAULT_BASE_FEE",
    "DEFAULT_NETWORK_TYPE",
    "DEFAULT_RELAY_ENDPOINT",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_TIMEOUT_SECONDS",
    "NETWORK_TYPES",
    "PUBLIC_HORIZON_URL",
    "PUBLIC_NETWORK_PASSPHRASE",
    "TESTNET_HORIZON_URL",
    "TESTNET_NETWORK_PASSPHRASE",
]
