# sfclient/types/block.py

from typing import Optional
from msgspec import Struct, field

from .primitives import EvmAddress, EvmHash


class BlockRef(Struct, frozen=True):
    number: int = 0
    id: str = ""

    @property
    def is_empty(self) -> bool:
        return self.number == 0 and self.id == ""

    def __str__(self) -> str:
        if self.is_empty:
            return "None"
        return f"#{self.number} ({self.id})"


EMPTY_BLOCK_REF = BlockRef()


class TransferEvent(Struct, frozen=True):
    from_: EvmAddress = field(name="from")  # from is protected word in python
    to: EvmAddress
    amount: int = 0


class Call(Struct):
    index: int
    address: EvmAddress
    transfer_events: list[TransferEvent] = []


class TransactionTrace(Struct):
    hash: EvmHash
    calls: list[Call] = []
    from_: Optional[EvmAddress] = field(name="from", default=None)
    to: Optional[EvmAddress] = None


class Block(Struct):
    number: int
    hash: str  # hex without 0x, matches the remote block id format
    parent_hash: str = ""
    transaction_traces: list[TransactionTrace] = []

    def as_ref(self) -> BlockRef:
        return BlockRef(number=self.number, id=self.hash)

    def previous_ref(self) -> BlockRef:
        if not self.parent_hash:
            return EMPTY_BLOCK_REF
        return BlockRef(number=max(self.number - 1, 0), id=self.parent_hash)
