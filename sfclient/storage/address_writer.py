# sfclient/storage/address_writer.py

"""
Address sinks writing one discovered address per line.

The output option follows these rules:
- "-" writes to standard output (never closed by the sink)
- "" disables writing
- anything else is a file path, "{range}" is replaced by the block range
  without spaces and missing parent directories are created
"""
import sys
import logging
from pathlib import Path
from typing import IO, Iterable, Optional

from ..core.exceptions import InvalidArgument, SinkWriteError
from ..types import BlockRange, BlockRef
from .interfaces import AddressSinkInterface

END_OF_LINE = "\n"


class StreamAddressSink(AddressSinkInterface):
    """Writes addresses to a text stream, flushing after each block."""

    def __init__(self, stream: IO[str], name: str, owns_stream: bool = False):
        self.stream = stream
        self.name = name
        self.owns_stream = owns_stream
        self.closed = False
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def write_line(self, line: str) -> None:
        try:
            self.stream.write(line)
            self.stream.write(END_OF_LINE)
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"unable to write address line ({line}) to {self.name}: {e}", address=line)

    def write_addresses(self, addresses: Iterable[str], block: Optional[BlockRef] = None) -> int:
        written = 0
        block_label = str(block) if block is not None else None
        for address in addresses:
            try:
                self.write_line(address)
            except SinkWriteError as e:
                raise SinkWriteError(f"unable to write address {block_label} line ({address}): {e.message}",
                                     address=address, block=block_label) from e
            written += 1

        if written:
            try:
                self.stream.flush()
            except (OSError, ValueError) as e:
                raise SinkWriteError(f"unable to flush {self.name}: {e}", block=block_label)
        return written

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.owns_stream:
            self.stream.close()
            self.logger.debug(f"Closed address output {self.name}")


class NullAddressSink(AddressSinkInterface):
    """Discards addresses, used when output is disabled."""

    def __init__(self):
        self.closed = False

    def write_line(self, line: str) -> None:
        pass

    def close(self) -> None:
        self.closed = True


def resolve_output_path(output: str, block_range: BlockRange) -> str:
    return output.strip().replace("{range}", str(block_range).replace(" ", ""), 1)


def open_address_sink(output: Optional[str], block_range: BlockRange) -> AddressSinkInterface:
    """
    Open the sink described by the output option.

    Args:
        output: "-", "" or a file path template
        block_range: Range substituted for "{range}"

    Returns:
        An opened sink, the caller closes it
    """
    if output is None or not output.strip():
        return NullAddressSink()

    target = resolve_output_path(output, block_range)
    if target == "-":
        return StreamAddressSink(sys.stdout, name="<stdout>")

    path = Path(target)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InvalidArgument(f"unable to create directories {str(path.parent)!r}: {e}", argument="output")

    try:
        handle = path.open("w", encoding="utf-8")
    except OSError as e:
        raise InvalidArgument(f"unable to create file {target!r}: {e}", argument="output")

    return StreamAddressSink(handle, name=target, owns_stream=True)
