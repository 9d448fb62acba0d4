# sfclient/types/constants.py

from .primitives import EvmAddress

# Mint and burn counterparty, never reported as a discovered address
ZERO_ADDRESS = EvmAddress("0x" + "0" * 40)

DEFAULT_ENDPOINT = "api.streamingfast.io:443"
DEFAULT_AUTH_URL = "https://auth.streamingfast.io"

NETWORK_ENDPOINTS = {
    "bsc": "bsc.streamingfast.io:443",
    "polygon": "polygon.streamingfast.io:443",
    "heco": "heco.streamingfast.io:443",
    "fantom": "fantom.streamingfast.io:443",
}

RETRY_DELAY_SECONDS = 5.0
STATUS_FREQUENCY_SECONDS = 15.0

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1
