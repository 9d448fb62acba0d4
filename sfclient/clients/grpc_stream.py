# sfclient/clients/grpc_stream.py

import socket
import ssl
from typing import Iterator, Optional, Tuple

import grpc

from ..core.exceptions import StreamSetupError, StreamTransportError
from ..core.logging import LoggingMixin
from ..types import BlocksRequest, Cursor, ForkStep, StreamMessage
from .interfaces import BlockStreamClientInterface
from .wire import BLOCKS_METHOD, BlockResponseV2, BlocksRequestV2


def to_wire_request(request: BlocksRequest):
    return BlocksRequestV2(
        start_block_num=request.start_block_num,
        start_cursor=request.start_cursor,
        stop_block_num=request.stop_block_num,
        fork_steps=[int(step) for step in request.fork_steps],
        include_filter_expr=request.include_filter_expr,
        details=int(request.details),
    )


def from_wire_response(response) -> StreamMessage:
    try:
        step = ForkStep(response.step)
    except ValueError:
        step = ForkStep.NEW

    return StreamMessage(
        payload=response.block.value,
        cursor=Cursor(response.cursor),
        size=response.ByteSize(),
        step=step,
        type_url=response.block.type_url or None,
    )


def split_endpoint(endpoint: str) -> Tuple[str, int]:
    """Host and port of a gRPC endpoint, the port defaults to 443"""
    host, sep, port = endpoint.rpartition(":")
    if not sep or not (port.isascii() and port.isdigit()):
        return endpoint.strip("[]"), 443
    if ":" in host and not host.startswith("["):
        # bare IPv6 address without a port
        return endpoint, 443
    return host.strip("[]"), int(port)


def fetch_server_certificate(host: str, port: int, timeout: float = 10.0) -> Tuple[str, dict]:
    """
    Fetch the certificate presented by a server without validating it.

    Returns:
        The PEM encoded certificate and its decoded fields, empty when the
        certificate cannot be decoded on its own
    """
    pem = ssl.get_server_certificate((host, port), timeout=timeout)

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.load_verify_locations(cadata=pem)
    context.verify_flags |= ssl.VERIFY_X509_PARTIAL_CHAIN
    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            with context.wrap_socket(sock, server_hostname=host) as tls:
                return pem, tls.getpeercert() or {}
    except ssl.SSLError:
        return pem, {}


def certificate_target_name(certificate: dict, default: str) -> str:
    """Name the presented certificate is valid for, used as TLS target name"""
    for kind, value in certificate.get("subjectAltName", ()):
        if kind == "DNS":
            return value.replace("*", "skip-verify", 1)
    for rdn in certificate.get("subject", ()):
        for key, value in rdn:
            if key == "commonName":
                return value.replace("*", "skip-verify", 1)
    return default


class GrpcBlockStreamClient(BlockStreamClientInterface, LoggingMixin):
    """
    Client for the dfuse.bstream.v1.BlockStreamV2 service.

    One channel is kept for the client lifetime, each `open` issues a new
    Blocks call on it with the bearer token of that attempt.
    """

    def __init__(self, endpoint: str, skip_verify: bool = False, plaintext: bool = False,
                 channel: Optional[grpc.Channel] = None):
        self.endpoint = endpoint
        self.skip_verify = skip_verify
        self.plaintext = plaintext
        self._channel = channel
        self._blocks = None

    def _create_channel(self) -> grpc.Channel:
        options = [("grpc.max_receive_message_length", 1024 * 1024 * 1024)]

        if self.plaintext:
            return grpc.insecure_channel(self.endpoint, options=options)

        if self.skip_verify:
            # Trust whatever certificate the server presents, under the name it is issued for
            host, port = split_endpoint(self.endpoint)
            pem, certificate = fetch_server_certificate(host, port)
            target_name = certificate_target_name(certificate, host)
            credentials = grpc.ssl_channel_credentials(root_certificates=pem.encode())
            options.append(("grpc.ssl_target_name_override", target_name))
            self.log_debug("Skipping server certificate verification", endpoint=self.endpoint, target_name=target_name)
            return grpc.secure_channel(self.endpoint, credentials, options=options)

        return grpc.secure_channel(self.endpoint, grpc.ssl_channel_credentials(), options=options)

    def _blocks_callable(self):
        if self._blocks is None:
            if self._channel is None:
                try:
                    self._channel = self._create_channel()
                except (OSError, ValueError) as e:
                    raise StreamSetupError(f"unable to create external gRPC client for {self.endpoint}: {e}")

            self._blocks = self._channel.unary_stream(
                BLOCKS_METHOD,
                request_serializer=BlocksRequestV2.SerializeToString,
                response_deserializer=BlockResponseV2.FromString,
            )
        return self._blocks

    def open(self, request: BlocksRequest, token: str) -> Iterator[StreamMessage]:
        blocks = self._blocks_callable()
        metadata = [("authorization", f"Bearer {token}")]

        try:
            responses = blocks(to_wire_request(request), metadata=metadata)
        except grpc.RpcError as e:
            raise StreamSetupError(f"unable to start blocks stream: {e}")

        self.log_debug("Blocks stream opened", endpoint=self.endpoint, cursor=request.start_cursor)
        return self._receive(responses)

    def _receive(self, responses) -> Iterator[StreamMessage]:
        try:
            for response in responses:
                yield from_wire_response(response)
        except grpc.RpcError as e:
            code = e.code() if hasattr(e, "code") else None
            details = e.details() if hasattr(e, "details") else str(e)
            raise StreamTransportError(
                f"blocks stream failed: {details}",
                code=code.name if code is not None else None,
            )

    def close(self) -> None:
        if self._channel is not None:
            self._channel.close()
            self._channel = None
            self._blocks = None
