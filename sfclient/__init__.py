# sfclient/__init__.py

import logging
from typing import Optional

from .core.config import StreamConfig
from .core.logging import StreamLogger, log_with_context
from .clients.auth import ApiTokenProvider
from .clients.grpc_stream import GrpcBlockStreamClient
from .decode.block_decoder import BlockDecoder
from .storage.interfaces import AddressSinkInterface
from .stream.dedup import SeenAddressSet
from .stream.filter import tracked_address_set
from .stream.scanner import TransactionScanner
from .stream.session import StreamingSession
from .stream.stats import SessionStats


def create_session(config: StreamConfig, sink: AddressSinkInterface,
                   stream_client: Optional[GrpcBlockStreamClient] = None) -> StreamingSession:
    """Wire the production collaborators of a streaming session."""
    logger = StreamLogger.get_logger('core.init')

    tracked = tracked_address_set(config.filter_expr)
    if not tracked:
        log_with_context(logger, logging.WARNING,
                         "Filter expression names no address list, no address will be reported")

    log_with_context(logger, logging.DEBUG, "Creating streaming session",
                     tracked_count=len(tracked),
                     **config.redacted())

    return StreamingSession(
        config=config,
        token_provider=ApiTokenProvider(config.api_key, config.auth_url),
        stream_client=stream_client or GrpcBlockStreamClient(
            config.endpoint,
            skip_verify=config.skip_verify,
            plaintext=config.plaintext,
        ),
        decoder=BlockDecoder(),
        scanner=TransactionScanner(tracked),
        sink=sink,
        seen=SeenAddressSet(config.dedup_scope),
        stats=SessionStats(),
    )


__all__ = [
    "StreamConfig",
    "StreamingSession",
    "create_session",
]
