# sfclient/stream/dedup.py

from typing import Dict

from ..types import DedupScope, EvmAddress, ZERO_ADDRESS
from ..utils.addresses import normalize_address


class SeenAddressSet:
    """
    First-seen tracking for discovered addresses.

    The scope decides what a new connection does to the state:
    - CONNECTION: cleared on every (re)connect, memory is bounded by one
      connection but an address can be emitted again after a reconnect
    - PROCESS: kept for the lifetime of the process
    """

    def __init__(self, scope: DedupScope = DedupScope.CONNECTION):
        self.scope = scope
        self._seen: Dict[EvmAddress, bool] = {}

    def mark_if_new(self, address: str) -> bool:
        normalized = normalize_address(address)
        if normalized == ZERO_ADDRESS or self._seen.get(normalized):
            return False
        self._seen[normalized] = True
        return True

    def begin_connection(self) -> None:
        if self.scope is DedupScope.CONNECTION:
            self._seen.clear()

    def __contains__(self, address: str) -> bool:
        return self._seen.get(normalize_address(address), False)

    def __len__(self) -> int:
        return len(self._seen)
