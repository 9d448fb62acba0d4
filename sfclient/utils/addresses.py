# sfclient/utils/addresses.py

from typing import Union

from web3 import Web3

from ..types import EvmAddress


def normalize_address(address: Union[str, bytes]) -> EvmAddress:
    """Lowercase 0x prefixed form, raw bytes from the wire are hex encoded."""
    if isinstance(address, (bytes, bytearray)):
        return EvmAddress(Web3.to_hex(primitive=bytes(address)).lower())
    address = address.strip().lower()
    if address and not address.startswith("0x"):
        address = f"0x{address}"
    return EvmAddress(address)
