# sfclient/stream/session.py

import time
from enum import Enum
from typing import Callable, Iterator, List, Optional

from ..clients.interfaces import BlockStreamClientInterface, TokenProviderInterface
from ..core.config import StreamConfig
from ..core.exceptions import StreamTransportError
from ..core.logging import LoggingMixin
from ..decode.interfaces import BlockDecoderInterface
from ..storage.interfaces import AddressSinkInterface
from ..types import (
    BlockDetails,
    BlockRef,
    BlocksRequest,
    Cursor,
    EMPTY_BLOCK_REF,
    EvmAddress,
    StreamMessage,
    fork_steps,
)
from .dedup import SeenAddressSet
from .scanner import TransactionScanner
from .stats import Clock, SessionStats


class SessionState(Enum):
    CONNECTING = "connecting"
    STREAMING = "streaming"
    RECONNECTING = "reconnecting"
    COMPLETED = "completed"


class StreamingSession(LoggingMixin):
    """
    Drives one blocks subscription until the remote side ends it cleanly.

    Lifecycle:
    1. CONNECTING: fresh token, new dedup scope, subscription from the cursor
       (or the block range when no cursor is known yet)
    2. STREAMING: decode, scan, advance cursor, emit addresses, count
    3. RECONNECTING: fixed delay, then back to CONNECTING with the last cursor
    4. COMPLETED: clean end of stream

    Transport errors while receiving are the only retried failures. Token,
    setup, decode and output errors propagate to the caller.
    """

    def __init__(self,
                 config: StreamConfig,
                 token_provider: TokenProviderInterface,
                 stream_client: BlockStreamClientInterface,
                 decoder: BlockDecoderInterface,
                 scanner: TransactionScanner,
                 sink: AddressSinkInterface,
                 seen: Optional[SeenAddressSet] = None,
                 stats: Optional[SessionStats] = None,
                 clock: Clock = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            config: Validated client configuration
            token_provider: Issues a bearer token per connection attempt
            stream_client: Opens blocks subscriptions
            decoder: Turns message payloads into Block structs
            scanner: Extracts first-seen transfer addresses
            sink: Receives discovered addresses, one per line
            seen: Dedup state, created from the configured scope when omitted
            stats: Session counters, created on the injected clock when omitted
            clock: Monotonic time source, seconds
            sleep: Blocking delay used between reconnects
        """
        self.config = config
        self.token_provider = token_provider
        self.stream_client = stream_client
        self.decoder = decoder
        self.scanner = scanner
        self.sink = sink
        self.seen = seen if seen is not None else SeenAddressSet(config.dedup_scope)
        self.stats = stats if stats is not None else SessionStats(clock)
        self._clock = clock
        self._sleep = sleep

        self.state = SessionState.CONNECTING
        self.cursor: Cursor = config.start_cursor
        self.last_block_ref: BlockRef = EMPTY_BLOCK_REF
        self.next_status = clock() + config.status_frequency
        self._messages: Optional[Iterator[StreamMessage]] = None

    def build_request(self) -> BlocksRequest:
        """Subscription parameters for the next connection attempt."""
        block_range = self.config.block_range
        return BlocksRequest(
            start_block_num=0 if self.cursor else block_range.start,
            start_cursor=self.cursor,
            stop_block_num=block_range.end,
            fork_steps=fork_steps(self.config.handle_forks),
            include_filter_expr=self.config.filter_expr,
            details=BlockDetails.FULL,
        )

    def run(self) -> SessionStats:
        self.log_info("Starting stream",
                      endpoint=self.config.endpoint,
                      range=str(self.config.block_range),
                      cursor=self.cursor,
                      handle_forks=self.config.handle_forks,
                      dedup_scope=self.seen.scope.value)

        while self.state is not SessionState.COMPLETED:
            if self.state is SessionState.CONNECTING:
                self._connect()
            elif self.state is SessionState.STREAMING:
                self._consume()
            elif self.state is SessionState.RECONNECTING:
                self._reconnect()

        self.log_info("Stream completed",
                      cursor=self.cursor,
                      block=str(self.last_block_ref),
                      stats=str(self.stats))
        return self.stats

    def _connect(self) -> None:
        token = self.token_provider.acquire_token()
        self.seen.begin_connection()

        request = self.build_request()
        self.log_debug("Opening blocks subscription",
                       cursor=request.start_cursor,
                       range=f"{request.start_block_num} - {request.stop_block_num}",
                       step=",".join(step.name for step in request.fork_steps))

        self._messages = self.stream_client.open(request, token)
        self.state = SessionState.STREAMING

    def _consume(self) -> None:
        try:
            message = next(self._messages)
        except StopIteration:
            self._messages = None
            self.state = SessionState.COMPLETED
            return
        except StreamTransportError as e:
            self._messages = None
            self.log_error("Error",
                           error=e.message,
                           cursor=self.cursor,
                           block=str(self.last_block_ref),
                           retry_delay=self.config.retry_delay)
            self.state = SessionState.RECONNECTING
            return

        self.process_message(message)

    def _reconnect(self) -> None:
        self._sleep(self.config.retry_delay)
        self.stats.record_restart()
        self.log_info("Reconnecting",
                      cursor=self.cursor,
                      block=str(self.last_block_ref),
                      restart_count=self.stats.restart_count.total)
        self.state = SessionState.CONNECTING

    def process_message(self, message: StreamMessage) -> List[EvmAddress]:
        """Apply one received message and return the addresses it discovered."""
        block = self.decoder.decode(message.payload, message.type_url)
        discovered = self.scanner.scan_block(block, self.seen)

        self.cursor = message.cursor
        self.last_block_ref = block.as_ref()

        if self.config.trace:
            self.log_debug("Block received",
                           block=str(self.last_block_ref),
                           previous=str(block.previous_ref()),
                           cursor=self.cursor,
                           step=message.step.name)

        if discovered:
            self.sink.write_addresses(discovered, self.last_block_ref)

        self.stats.record_block(message.size)
        self._report_status()
        return discovered

    def _report_status(self) -> None:
        now = self._clock()
        if now < self.next_status:
            return

        self.next_status = now + self.config.status_frequency
        self.log_info("Stream blocks progress",
                      stats=str(self.stats),
                      block=str(self.last_block_ref),
                      address_count=len(self.seen))
