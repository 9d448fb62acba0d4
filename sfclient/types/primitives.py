# sfclient/types/primitives.py

from typing import NewType

EvmAddress = NewType('EvmAddress', str)  # lowercase, 0x prefixed
EvmHash = NewType('EvmHash', str)
Cursor = NewType('Cursor', str)
