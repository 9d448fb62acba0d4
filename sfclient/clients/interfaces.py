"""
Interfaces for the remote collaborators of a streaming session.

This module defines the contracts the session controller relies on: the
identity provider issuing API tokens and the blocks streaming service.
"""
from abc import ABC, abstractmethod
from typing import Iterator

from ..types import BlocksRequest, StreamMessage


class TokenProviderInterface(ABC):
    """Interface for components issuing short-lived API tokens."""

    @abstractmethod
    def acquire_token(self) -> str:
        """
        Issue an access token.

        Returns:
            Bearer token attached to the blocks subscription

        Raises:
            CredentialError: When no token can be issued
        """
        pass


class BlockStreamClientInterface(ABC):
    """Interface for server-streaming blocks clients."""

    @abstractmethod
    def open(self, request: BlocksRequest, token: str) -> Iterator[StreamMessage]:
        """
        Open a blocks subscription.

        The returned iterator yields messages in server order. It stops on a
        clean end of stream and raises StreamTransportError on any other
        failure while receiving.

        Args:
            request: Subscription parameters
            token: Bearer token for this connection attempt

        Returns:
            Iterator over the received messages

        Raises:
            StreamSetupError: When the subscription cannot be established
        """
        pass

    def close(self) -> None:
        """Release the underlying connection."""
        pass
