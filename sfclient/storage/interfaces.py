"""
Interfaces for discovered address outputs.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ..types import BlockRef


class AddressSinkInterface(ABC):
    """Interface for components receiving discovered addresses."""

    @abstractmethod
    def write_line(self, line: str) -> None:
        """
        Write one line.

        Raises:
            SinkWriteError: When the line cannot be written
        """
        pass

    def write_addresses(self, addresses: Iterable[str], block: Optional[BlockRef] = None) -> int:
        """Write each address on its own line, in order. Returns the number written."""
        written = 0
        for address in addresses:
            self.write_line(address)
            written += 1
        return written

    @abstractmethod
    def close(self) -> None:
        """Release the output, called exactly once."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
