# tests/conftest.py
"""
pytest fixtures for the streaming client

Everything remote is faked: token issuance, the blocks stream and block
decoding. Time is injected so reconnect delays cost nothing.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import pytest

from sfclient.clients.interfaces import BlockStreamClientInterface, TokenProviderInterface
from sfclient.core.config import StreamConfig
from sfclient.core.exceptions import CredentialError
from sfclient.core.logging import StreamLogger
from sfclient.decode.interfaces import BlockDecoderInterface
from sfclient.storage.interfaces import AddressSinkInterface
from sfclient.types import (
    Block,
    BlockRange,
    BlocksRequest,
    Call,
    Cursor,
    ForkStep,
    StreamMessage,
    TransactionTrace,
    TransferEvent,
)

ROUTER = "0x7a250d5630b4cf539739df2c5dacb4c659f2488d"
OTHER_CONTRACT = "0x" + "9" * 40
ADDRESS_A = "0x" + "a" * 40
ADDRESS_B = "0x" + "b" * 40
ADDRESS_C = "0x" + "c" * 40
ADDRESS_D = "0x" + "d" * 40

ROUTER_FILTER = f"to in ['{ROUTER}']"


# === Builders ===

def transfer_call(target: str, *transfers: Tuple[str, str], index: int = 0) -> Call:
    return Call(
        index=index,
        address=target,
        transfer_events=[TransferEvent(from_=sender, to=receiver, amount=1) for sender, receiver in transfers],
    )


def make_block(number: int, calls: Sequence[Call] = (), traces: Optional[Sequence[TransactionTrace]] = None) -> Block:
    if traces is None:
        traces = [TransactionTrace(hash=f"0x{number:064x}", calls=list(calls))] if calls else []
    return Block(
        number=number,
        hash=f"{number:064x}",
        parent_hash=f"{number - 1:064x}" if number > 0 else "",
        transaction_traces=list(traces),
    )


def make_message(block: Block, cursor: Optional[str] = None, size: int = 100,
                 step: ForkStep = ForkStep.NEW) -> StreamMessage:
    return StreamMessage(
        payload=str(block.number).encode(),
        cursor=Cursor(cursor or f"cursor-{block.number}"),
        size=size,
        step=step,
    )


# === Fakes ===

class FakeTokenProvider(TokenProviderInterface):
    def __init__(self, fail_on_call: Optional[int] = None):
        self.calls = 0
        self.fail_on_call = fail_on_call

    def acquire_token(self) -> str:
        self.calls += 1
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise CredentialError("unable to retrieve StreamingFast API token")
        return f"token-{self.calls}"


ScriptItem = Union[StreamMessage, Exception]


class ScriptedStreamClient(BlockStreamClientInterface):
    """
    Plays one script per connection attempt.

    A script is a list of messages and exceptions, an exception is raised
    when reached. Running out of items is a clean end of stream.
    """

    def __init__(self, scripts: Iterable[List[ScriptItem]]):
        self.scripts = list(scripts)
        self.requests: List[BlocksRequest] = []
        self.tokens: List[str] = []
        self.closed = False

    def open(self, request: BlocksRequest, token: str) -> Iterator[StreamMessage]:
        self.requests.append(request)
        self.tokens.append(token)
        if not self.scripts:
            raise AssertionError("no more connection scripts")
        return self._play(self.scripts.pop(0))

    def _play(self, script: List[ScriptItem]) -> Iterator[StreamMessage]:
        for item in script:
            if isinstance(item, Exception):
                raise item
            yield item

    def close(self) -> None:
        self.closed = True


class FakeDecoder(BlockDecoderInterface):
    """Payloads are block numbers, resolved against registered blocks."""

    def __init__(self, blocks: Iterable[Block] = ()):
        self.blocks: Dict[int, Block] = {block.number: block for block in blocks}

    def decode(self, payload: bytes, type_url: Optional[str] = None) -> Block:
        return self.blocks[int(payload.decode())]


class MemorySink(AddressSinkInterface):
    def __init__(self):
        self.lines: List[str] = []
        self.close_count = 0

    def write_line(self, line: str) -> None:
        self.lines.append(line)

    def close(self) -> None:
        self.close_count += 1


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# === Fixtures ===

@pytest.fixture(autouse=True)
def reset_logging():
    yield
    StreamLogger.reset()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def token_provider():
    return FakeTokenProvider()


@pytest.fixture
def make_config():
    def _make(**overrides) -> StreamConfig:
        values = dict(
            endpoint="localhost:9000",
            api_key="server_0123456789",
            filter_expr=ROUTER_FILTER,
            block_range=BlockRange(start=100, end=200),
        )
        values.update(overrides)
        return StreamConfig(**values)
    return _make


@pytest.fixture
def env():
    return {"STREAMINGFAST_API_KEY": "server_0123456789"}
