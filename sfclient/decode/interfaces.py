"""
Interfaces for block payload decoding components.

This module defines the interface for turning the raw payload of a
streamed message into the client Block structure.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ..types import Block


class BlockDecoderInterface(ABC):
    """Interface for block decoder implementations."""

    @abstractmethod
    def decode(self, payload: bytes, type_url: Optional[str] = None) -> Block:
        """
        Decode a block payload.

        Raises:
            BlockDecodeError: When the payload does not match the expected schema
        """
        pass
