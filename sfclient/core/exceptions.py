# sfclient/core/exceptions.py
"""
Exceptions raised by the streaming client.

Everything derives from SFClientError. Only StreamTransportError is
recoverable: the session controller reconnects on it. Every other error
aborts the run.
"""

from typing import Any, Dict, Optional


class SFClientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgument(SFClientError):
    """Raised for bad command line arguments or configuration."""

    def __init__(self, message: str, argument: Optional[str] = None):
        details = {}
        if argument is not None:
            details["argument"] = argument
        super().__init__(message, details)
        self.argument = argument


class CredentialError(SFClientError):
    """Raised when an API token cannot be issued."""


class StreamSetupError(SFClientError):
    """Raised when the blocks subscription cannot be established."""


class StreamTransportError(SFClientError):
    """Raised when an established stream fails while receiving."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, {"code": code} if code else None)
        self.code = code


class BlockDecodeError(SFClientError):
    """Raised when a received block payload cannot be decoded."""


class SinkWriteError(SFClientError):
    """Raised when a discovered address cannot be written to the output."""

    def __init__(self, message: str, address: Optional[str] = None, block: Optional[str] = None):
        details = {}
        if address:
            details["address"] = address
        if block:
            details["block"] = block
        super().__init__(message, details)
        self.address = address
