# tests/test_block_decoder.py

import pytest

from sfclient.clients.wire import (
    CodecBigInt,
    CodecBlock,
    CodecBlockHeader,
    CodecCall,
    CodecTransactionTrace,
    CodecTransferEvent,
    ETHEREUM_BLOCK_TYPE_URL,
)
from sfclient.core.exceptions import BlockDecodeError
from sfclient.decode.block_decoder import BlockDecoder

from conftest import ADDRESS_A, ADDRESS_B, ROUTER


def raw_address(address: str) -> bytes:
    return bytes.fromhex(address[2:])


def encoded_block() -> bytes:
    event = CodecTransferEvent(**{
        "from": raw_address(ADDRESS_A),
        "to": raw_address(ADDRESS_B),
        "amount": CodecBigInt(bytes=(1000).to_bytes(2, "big")),
    })
    call = CodecCall(index=1, address=raw_address(ROUTER), erc20_transfer_events=[event])
    trace = CodecTransactionTrace(**{
        "to": raw_address(ROUTER),
        "from": raw_address(ADDRESS_A),
        "hash": bytes.fromhex("ab" * 32),
        "index": 0,
        "calls": [call],
    })
    block = CodecBlock(
        hash=bytes.fromhex("cd" * 32),
        number=11700000,
        header=CodecBlockHeader(parent_hash=bytes.fromhex("ef" * 32)),
        transaction_traces=[trace],
    )
    return block.SerializeToString()


def test_decodes_block_reference_and_traces():
    block = BlockDecoder().decode(encoded_block(), ETHEREUM_BLOCK_TYPE_URL)

    assert block.number == 11700000
    assert block.hash == "cd" * 32
    assert str(block.as_ref()) == f"#11700000 ({'cd' * 32})"
    assert block.previous_ref().id == "ef" * 32

    trace = block.transaction_traces[0]
    assert trace.hash == "0x" + "ab" * 32
    assert trace.from_ == ADDRESS_A
    assert trace.to == ROUTER

    call = trace.calls[0]
    assert call.index == 1
    assert call.address == ROUTER
    assert call.transfer_events[0].from_ == ADDRESS_A
    assert call.transfer_events[0].to == ADDRESS_B
    assert call.transfer_events[0].amount == 1000


def test_missing_type_url_is_accepted():
    assert BlockDecoder().decode(encoded_block()).number == 11700000


def test_type_url_host_prefix_is_ignored():
    decoder = BlockDecoder()
    assert decoder.decode(encoded_block(), "example.com/dfuse.ethereum.codec.v1.Block").number == 11700000
    assert decoder.decode(encoded_block(), "dfuse.ethereum.codec.v1.Block").number == 11700000


def test_unexpected_type_url_is_rejected():
    with pytest.raises(BlockDecodeError, match="unexpected block payload type"):
        BlockDecoder().decode(encoded_block(), "type.googleapis.com/sf.near.codec.v1.Block")


def test_garbage_payload_is_rejected():
    with pytest.raises(BlockDecodeError):
        BlockDecoder().decode(b"\xff\xff\xff\xff", ETHEREUM_BLOCK_TYPE_URL)
