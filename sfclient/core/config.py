# sfclient/core/config.py

from msgspec import Struct
from typing import Dict, Optional, Sequence
from pathlib import Path

from ..types import (
    BlockRange,
    Cursor,
    DedupScope,
    DEFAULT_AUTH_URL,
    DEFAULT_ENDPOINT,
    NETWORK_ENDPOINTS,
    RETRY_DELAY_SECONDS,
    STATUS_FREQUENCY_SECONDS,
)
from ..utils.env import get_env
from .exceptions import InvalidArgument
from .logging import StreamLogger, log_with_context, trace_requested, DEBUG


class StreamConfig(Struct, frozen=True):
    endpoint: str
    api_key: str
    filter_expr: str
    block_range: BlockRange
    start_cursor: Cursor = Cursor("")
    handle_forks: bool = False
    skip_verify: bool = False
    plaintext: bool = False
    auth_url: str = DEFAULT_AUTH_URL
    output: str = "-"
    dedup_scope: DedupScope = DedupScope.CONNECTION
    retry_delay: float = RETRY_DELAY_SECONDS
    status_frequency: float = STATUS_FREQUENCY_SECONDS
    trace: bool = False
    log_dir: Optional[Path] = None

    @classmethod
    def from_options(cls,
                     filter_expr: str,
                     block_range: BlockRange,
                     env: Dict[str, str],
                     endpoint: Optional[str] = None,
                     networks: Sequence[str] = (),
                     start_cursor: str = "",
                     handle_forks: bool = False,
                     skip_verify: bool = False,
                     plaintext: bool = False,
                     output: str = "-",
                     dedup_scope: str = DedupScope.CONNECTION.value,
                     trace: bool = False,
                     log_dir: Optional[Path] = None) -> 'StreamConfig':
        logger = StreamLogger.get_logger('core.config')

        if len(networks) > 1:
            raise InvalidArgument(
                "Cannot set more than one network flag (ex: --polygon, --bsc)",
                argument="network",
            )

        api_key = get_env("API_KEY", env=env)
        if not api_key:
            raise InvalidArgument(
                "the environment variable STREAMINGFAST_API_KEY must be set to a valid streamingfast API key value",
                argument="STREAMINGFAST_API_KEY",
            )

        resolved_endpoint = cls.resolve_endpoint(endpoint, networks, env)

        try:
            scope = DedupScope(dedup_scope)
        except ValueError:
            raise InvalidArgument(f"unknown dedup scope {dedup_scope!r}", argument="dedup-scope")

        config = cls(
            endpoint=resolved_endpoint,
            api_key=api_key,
            filter_expr=filter_expr,
            block_range=block_range,
            start_cursor=Cursor(start_cursor or ""),
            handle_forks=handle_forks,
            skip_verify=skip_verify,
            plaintext=plaintext,
            auth_url=get_env("AUTH_URL", DEFAULT_AUTH_URL, env=env).rstrip("/"),
            output=output,
            dedup_scope=scope,
            trace=trace or trace_requested(env),
            log_dir=log_dir,
        )

        log_with_context(logger, DEBUG, "StreamConfig created",
                         endpoint=config.endpoint,
                         range=str(config.block_range),
                         cursor=config.start_cursor,
                         dedup_scope=config.dedup_scope.value)

        return config

    @staticmethod
    def resolve_endpoint(endpoint: Optional[str], networks: Sequence[str], env: Dict[str, str]) -> str:
        """Network preset wins, then an explicit endpoint, then STREAMINGFAST_ENDPOINT."""
        if networks:
            network = networks[0]
            if network not in NETWORK_ENDPOINTS:
                raise InvalidArgument(f"unknown network {network!r}", argument="network")
            return NETWORK_ENDPOINTS[network]

        if endpoint and endpoint != DEFAULT_ENDPOINT:
            return endpoint

        return get_env("ENDPOINT", DEFAULT_ENDPOINT, env=env)

    def redacted(self) -> dict:
        """Loggable view of the configuration, without the API key."""
        return {
            "endpoint": self.endpoint,
            "range": str(self.block_range),
            "cursor": self.start_cursor,
            "handle_forks": self.handle_forks,
            "output": self.output,
            "dedup_scope": self.dedup_scope.value,
        }
