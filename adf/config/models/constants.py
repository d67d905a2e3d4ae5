"""
Default values for configuration models.
"""

PUBLIC_HORIZON_URL = "https://horizon.stellar.org"
TESTNET_HORIZON_URL = "https://horizon-testnet.stellar.org"

PUBLIC_NETWORK_PASSPHRASE = "Public Global Stellar Network ; September 2015"
TESTNET_NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"

NETWORK_TYPES = {
    "PUBLIC": (PUBLIC_HORIZON_URL, PUBLIC_NETWORK_PASSPHRASE),
    "TESTNET": (TESTNET_HORIZON_URL, TESTNET_NETWORK_PASSPHRASE),
}

DEFAULT_NETWORK_TYPE = "PUBLIC"
# Stroops per operation
DEFAULT_BASE_FEE = 100
# 0 disables the validity window
DEFAULT_TIMEOUT_SECONDS = 0
DEFAULT_REQUEST_TIMEOUT = 15

DEFAULT_RELAY_ENDPOINT = "https://eurmtl.me/remote/sep07/add"
DEFAULT_RELAY_TIMEOUT = 15
DEFAULT_URI_MESSAGE = "Update account data"
