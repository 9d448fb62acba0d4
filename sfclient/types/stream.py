# sfclient/types/stream.py

from enum import Enum, IntEnum
from typing import Optional, Tuple
from msgspec import Struct

from .primitives import Cursor


class ForkStep(IntEnum):
    """Notification kinds a block can be streamed with (values match the wire enum)"""
    NEW = 1
    UNDO = 2
    IRREVERSIBLE = 4


def fork_steps(handle_forks: bool) -> Tuple[ForkStep, ...]:
    if handle_forks:
        return (ForkStep.NEW, ForkStep.IRREVERSIBLE, ForkStep.UNDO)
    return (ForkStep.NEW,)


class BlockDetails(IntEnum):
    FULL = 0
    LIGHT = 1


class DedupScope(str, Enum):
    CONNECTION = "connection"
    PROCESS = "process"


class BlockRange(Struct, frozen=True):
    start: int = 0  # negative means relative to the chain head
    end: int = 0    # 0 means unbounded

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


class BlocksRequest(Struct, frozen=True):
    start_block_num: int
    start_cursor: Cursor
    stop_block_num: int
    fork_steps: Tuple[ForkStep, ...]
    include_filter_expr: str
    details: BlockDetails = BlockDetails.FULL


class StreamMessage(Struct, frozen=True):
    payload: bytes
    cursor: Cursor
    size: int
    step: ForkStep = ForkStep.NEW
    type_url: Optional[str] = None
