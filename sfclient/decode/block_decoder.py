# sfclient/decode/block_decoder.py

from typing import Optional

from google.protobuf.message import DecodeError
from web3 import Web3

from ..clients.wire import CodecBlock, ETHEREUM_BLOCK_TYPE_URL
from ..core.exceptions import BlockDecodeError
from ..types import (
    Block,
    Call,
    EvmHash,
    TransactionTrace,
    TransferEvent,
)
from ..utils.addresses import normalize_address
from .interfaces import BlockDecoderInterface


def message_name(type_url: str) -> str:
    """Full message name of an Any type URL, the host prefix is ignored"""
    return type_url.rsplit("/", 1)[-1]


class BlockDecoder(BlockDecoderInterface):
    """Decodes dfuse.ethereum.codec.v1.Block payloads into Block structs"""

    def __init__(self, expected_type_url: str = ETHEREUM_BLOCK_TYPE_URL):
        self.expected_type_url = expected_type_url

    def decode(self, payload: bytes, type_url: Optional[str] = None) -> Block:
        if type_url and message_name(type_url) != message_name(self.expected_type_url):
            raise BlockDecodeError(
                f"unexpected block payload type {type_url!r}, expecting {self.expected_type_url!r}",
                {"type_url": type_url},
            )

        raw_block = CodecBlock()
        try:
            raw_block.ParseFromString(payload)
        except DecodeError as e:
            raise BlockDecodeError(f"should have been able to unmarshal received block payload: {e}")

        return Block(
            number=raw_block.number,
            hash=raw_block.hash.hex(),
            parent_hash=raw_block.header.parent_hash.hex(),
            transaction_traces=[self.decode_trace(trace) for trace in raw_block.transaction_traces],
        )

    def decode_trace(self, raw_trace) -> TransactionTrace:
        sender = getattr(raw_trace, "from")  # from is protected word in python
        return TransactionTrace(
            hash=EvmHash(Web3.to_hex(primitive=raw_trace.hash)),
            calls=[self.decode_call(call) for call in raw_trace.calls],
            from_=normalize_address(sender) if sender else None,
            to=normalize_address(raw_trace.to) if raw_trace.to else None,
        )

    def decode_call(self, raw_call) -> Call:
        return Call(
            index=raw_call.index,
            address=normalize_address(raw_call.address),
            transfer_events=[
                TransferEvent(
                    from_=normalize_address(getattr(event, "from")),
                    to=normalize_address(event.to),
                    amount=int.from_bytes(event.amount.bytes, "big"),
                )
                for event in raw_call.erc20_transfer_events
            ],
        )
