"""
Shared pytest fixtures for Account Data Forms tests.

Provides deterministic account addresses and network configuration.
Ledger fakes live in tests/helpers.py.
"""

from typing import Dict

import pytest

from adf.config.models import ADFConfig, NetworkConfig, RelayConfig
from tests.helpers import make_account_id


# -----------------------------------------------------------------------------
# Account Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def account_id() -> str:
    return make_account_id(1)


@pytest.fixture
def refs() -> Dict[str, str]:
    """Named collection references A-F."""
    return {letter: make_account_id(10 + index) for index, letter in enumerate("ABCDEF")}


# -----------------------------------------------------------------------------
# Configuration Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def network_config() -> NetworkConfig:
    return NetworkConfig(network_type="TESTNET", horizon_url="https://horizon.example.test")


@pytest.fixture
def adf_config(network_config: NetworkConfig) -> ADFConfig:
    return ADFConfig(
        network=network_config,
        relay=RelayConfig(endpoint="https://relay.example.test/add", return_url="https://app.example.test/"),
    )
