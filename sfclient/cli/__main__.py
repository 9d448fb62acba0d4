# sfclient/cli/__main__.py

"""
StreamingFast blocks CLI

Usage: sf [flags] <filter> [<start_block>] [<end_block>]

Streams blocks matching <filter> and writes, one per line, every transfer
counterparty of a call to one of the addresses listed in the filter, the
first time it is seen.
"""

import os
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from sfclient import create_session
from sfclient.core.config import StreamConfig
from sfclient.core.exceptions import InvalidArgument, SFClientError
from sfclient.core.logging import StreamLogger, trace_requested
from sfclient.storage.address_writer import open_address_sink
from sfclient.stream.ranges import resolve_block_range
from sfclient.types import DEFAULT_ENDPOINT, DedupScope
from sfclient.utils.env import load_environment

EXAMPLES = """\b
Parameters:
  <filter>        A valid CEL filter expression for the Ethereum network, only
                  transactions matching the filter will be returned to you.
  <start_block>   Optional block number where to start streaming blocks from,
                  positive (an absolute block) or negative (a number of
                  blocks from the tip of the chain).
  <end_block>     Optional exclusive end boundary, the stream never stops
                  when omitted.

\b
Examples:
  # Watch all calls to the UniswapV2 Router, for a single block and close
  $ sf "to in ['0x7a250d5630b4cf539739df2c5dacb4c659f2488d']" 11700000 11700001
\b
  # Watch all calls to the UniswapV2 Router, include the last 100 blocks, and stream forever
  $ sf "to in ['0x7a250d5630b4cf539739df2c5dacb4c659f2488d']" -100
\b
  # Continue where you left off with all fork notifications (UNDO, IRREVERSIBLE)
  $ sf --handle-forks --start-cursor "10928019832019283019283" "to in ['0x7a250d5630b4cf539739df2c5dacb4c659f2488d']"
\b
  # Look at ALL blocks in a given range on Binance Smart Chain (BSC)
  $ sf --bsc "true" 100000 100002
\b
  # Look at recent blocks and stream forever on Fantom Opera Mainnet
  $ sf --fantom "true" -5
"""


def validate_arguments(filter_expr: str, block_args: Tuple[str, ...], start_cursor: str) -> None:
    """A filter needs at least a start block, or a cursor to continue from."""
    if not filter_expr or not filter_expr.strip():
        raise InvalidArgument("Expecting between 1 and 3 arguments, <filter> is empty", argument="filter")

    if not block_args and not start_cursor:
        raise InvalidArgument(
            "Expecting between 1 and 3 arguments, a <start_block> is required unless --start-cursor is set",
            argument="range",
        )


def selected_networks(bsc: bool, polygon: bool, heco: bool, fantom: bool) -> list:
    flags = {"bsc": bsc, "polygon": polygon, "heco": heco, "fantom": fantom}
    return [name for name, enabled in flags.items() if enabled]


@click.command(name="sf", epilog=EXAMPLES,
               context_settings={"help_option_names": ["-h", "--help"],
                                 "ignore_unknown_options": True})
@click.option('--endpoint', '-e', default=DEFAULT_ENDPOINT, show_default=True,
              help='The endpoint to connect the stream of blocks to')
@click.option('--bsc', is_flag=True, help='Force the endpoint to Binance Smart Chain')
@click.option('--polygon', is_flag=True, help='Force the endpoint to Polygon (previously Matic)')
@click.option('--heco', is_flag=True, help='Force the endpoint to Huobi Eco Chain')
@click.option('--fantom', is_flag=True, help='Force the endpoint to Fantom Opera Mainnet')
@click.option('--handle-forks', is_flag=True,
              help='Also request UNDO notifications for forked out blocks and IRREVERSIBLE once confirmed')
@click.option('--skip-verify', '-s', is_flag=True, help='Skip server certificate verification')
@click.option('--plaintext', is_flag=True, hidden=True, help='Connect without TLS (local endpoints)')
@click.option('--output', '-o', default='-', show_default=True,
              help="Write each address as one line, '-' is standard output, otherwise a file "
                   "where {range} is replaced by the block range")
@click.option('--start-cursor', default='', help='Last cursor used to continue where you left off')
@click.option('--dedup-scope', type=click.Choice([s.value for s in DedupScope]),
              default=DedupScope.CONNECTION.value, show_default=True,
              help='Forget seen addresses on every reconnect (connection) or never (process)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--trace', is_flag=True, help='Log every received block (also SF_TRACE=true)')
@click.option('--log-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Also write logs to files in this directory')
@click.option('--env-file', type=click.Path(dir_okay=False), help='Load environment variables from this file')
@click.argument('filter_expr', metavar='<filter>')
@click.argument('block_args', metavar='[<start_block>] [<end_block>]', nargs=-1)
def sf(endpoint, bsc, polygon, heco, fantom, handle_forks, skip_verify, plaintext, output,
       start_cursor, dedup_scope, verbose, trace, log_dir, env_file, filter_expr, block_args):
    """Stream blocks matching <filter> from a StreamingFast endpoint.

    Uses the STREAMINGFAST_API_KEY environment variable and writes the first
    seen transfer counterparties of calls to the addresses listed in the
    filter, within <start_block> and <end_block> when specified.
    """
    load_environment(env_file)
    env = dict(os.environ)

    StreamLogger.configure(
        log_dir=log_dir,
        log_level="DEBUG" if verbose else "INFO",
        console_enabled=True,
        structured_format=True,
        trace=trace or trace_requested(env),
    )

    try:
        validate_arguments(filter_expr, block_args, start_cursor)
        block_range = resolve_block_range(block_args)
        config = StreamConfig.from_options(
            filter_expr=filter_expr,
            block_range=block_range,
            env=env,
            endpoint=endpoint,
            networks=selected_networks(bsc, polygon, heco, fantom),
            start_cursor=start_cursor,
            handle_forks=handle_forks,
            skip_verify=skip_verify,
            plaintext=plaintext,
            output=output,
            dedup_scope=dedup_scope,
            trace=trace,
            log_dir=log_dir,
        )
        sink = open_address_sink(config.output, config.block_range)
    except InvalidArgument as e:
        raise click.UsageError(e.message)

    run_session(config, sink)


def run_session(config: StreamConfig, sink) -> None:
    session = None
    try:
        session = create_session(config, sink)
        stats = session.run()
    except KeyboardInterrupt:
        click.echo("Aborted", err=True)
        sys.exit(130)
    except SFClientError as e:
        raise click.ClickException(e.message)
    finally:
        sink.close()
        if session is not None:
            session.stream_client.close()

    for line in stats.summary_lines():
        click.echo(line, err=True)


def main(argv: Optional[list] = None) -> None:
    sf.main(args=argv, prog_name="sf")


if __name__ == '__main__':
    main()
