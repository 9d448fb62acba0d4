# sfclient/types/__init__.py

from .constants import (
    ZERO_ADDRESS,
    DEFAULT_ENDPOINT,
    DEFAULT_AUTH_URL,
    NETWORK_ENDPOINTS,
    RETRY_DELAY_SECONDS,
    STATUS_FREQUENCY_SECONDS,
)

from .primitives import (
    EvmAddress,
    EvmHash,
    Cursor,
)

# Block Types
from .block import (
    BlockRef,
    EMPTY_BLOCK_REF,
    TransferEvent,
    Call,
    TransactionTrace,
    Block,
)

# Stream Types
from .stream import (
    ForkStep,
    fork_steps,
    BlockDetails,
    DedupScope,
    BlockRange,
    BlocksRequest,
    StreamMessage,
)
