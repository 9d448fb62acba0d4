# sfclient/stream/scanner.py

from typing import FrozenSet, Iterable, List

from ..core.logging import LoggingMixin
from ..types import Block, EvmAddress, TransactionTrace, ZERO_ADDRESS
from ..utils.addresses import normalize_address
from .dedup import SeenAddressSet


class TransactionScanner(LoggingMixin):
    """
    Extracts transfer counterparties of calls made to tracked addresses.

    Only calls whose target is in the tracked set are looked at. For each
    transfer event of such a call, `from` then `to` are reported the first
    time they are seen in the current dedup scope. The zero address is
    never reported.
    """

    def __init__(self, tracked_addresses: Iterable[str]):
        self.tracked_addresses: FrozenSet[EvmAddress] = frozenset(
            normalize_address(a) for a in tracked_addresses
        )

    def scan_transaction(self, block: Block, trx_trace: TransactionTrace,
                         seen: SeenAddressSet) -> List[EvmAddress]:
        new_addresses: List[EvmAddress] = []

        for call in trx_trace.calls:
            if normalize_address(call.address) not in self.tracked_addresses:
                continue

            for event in call.transfer_events:
                for candidate in (event.from_, event.to):
                    address = normalize_address(candidate)
                    if address != ZERO_ADDRESS and seen.mark_if_new(address):
                        new_addresses.append(address)

        if new_addresses:
            self.log_debug("Transaction discovered addresses",
                           block=block.number,
                           address_count=len(new_addresses))

        return new_addresses

    def scan_block(self, block: Block, seen: SeenAddressSet) -> List[EvmAddress]:
        discovered: List[EvmAddress] = []
        for trx_trace in block.transaction_traces:
            discovered.extend(self.scan_transaction(block, trx_trace, seen))
        return discovered
