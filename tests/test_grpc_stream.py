# tests/test_grpc_stream.py

from unittest.mock import MagicMock

import grpc
import pytest

from sfclient.clients import grpc_stream
from sfclient.clients.grpc_stream import (
    GrpcBlockStreamClient,
    certificate_target_name,
    from_wire_response,
    split_endpoint,
    to_wire_request,
)
from sfclient.clients.wire import BLOCKS_METHOD, BlockResponseV2, ETHEREUM_BLOCK_TYPE_URL
from sfclient.core.exceptions import StreamSetupError, StreamTransportError
from sfclient.types import BlocksRequest, Cursor, ForkStep, fork_steps


def request(**overrides):
    values = dict(
        start_block_num=-100,
        start_cursor=Cursor(""),
        stop_block_num=0,
        fork_steps=fork_steps(True),
        include_filter_expr="true",
    )
    values.update(overrides)
    return BlocksRequest(**values)


def response(step=1, cursor="c1", payload=b"\x08\x01"):
    message = BlockResponseV2(step=step, cursor=cursor)
    message.block.type_url = ETHEREUM_BLOCK_TYPE_URL
    message.block.value = payload
    return message


class FakeRpcError(grpc.RpcError):
    def code(self):
        return grpc.StatusCode.UNAVAILABLE

    def details(self):
        return "connection reset by peer"


def test_request_is_encoded_with_all_fields():
    wire = to_wire_request(request(start_cursor=Cursor("abc"), stop_block_num=200))
    assert wire.start_block_num == -100
    assert wire.stop_block_num == 200
    assert wire.start_cursor == "abc"
    assert list(wire.fork_steps) == [1, 4, 2]
    assert wire.include_filter_expr == "true"
    assert wire.details == 0


def test_response_is_converted_to_stream_message():
    message = from_wire_response(response(step=2))
    assert message.step is ForkStep.UNDO
    assert message.cursor == "c1"
    assert message.payload == b"\x08\x01"
    assert message.type_url == ETHEREUM_BLOCK_TYPE_URL
    assert message.size > len(message.payload)


def test_unknown_step_is_treated_as_new():
    assert from_wire_response(response(step=0)).step is ForkStep.NEW


def test_open_sends_bearer_token_and_maps_receive_errors():
    def responses():
        yield response(cursor="c1")
        raise FakeRpcError()

    blocks = MagicMock(return_value=responses())
    channel = MagicMock()
    channel.unary_stream.return_value = blocks

    client = GrpcBlockStreamClient("localhost:9000", channel=channel)
    messages = client.open(request(), "jwt-token")

    assert next(messages).cursor == "c1"
    with pytest.raises(StreamTransportError) as excinfo:
        next(messages)
    assert excinfo.value.code == "UNAVAILABLE"

    assert channel.unary_stream.call_args[0][0] == BLOCKS_METHOD
    assert blocks.call_args[1]["metadata"] == [("authorization", "Bearer jwt-token")]

    client.close()
    channel.close.assert_called_once()


@pytest.mark.parametrize("endpoint,expected", [
    ("mainnet.eth.streamingfast.io:443", ("mainnet.eth.streamingfast.io", 443)),
    ("localhost:9000", ("localhost", 9000)),
    ("localhost", ("localhost", 443)),
    ("[::1]:9000", ("::1", 9000)),
    ("[::1]", ("::1", 443)),
])
def test_split_endpoint(endpoint, expected):
    assert split_endpoint(endpoint) == expected


@pytest.mark.parametrize("certificate,expected", [
    ({"subjectAltName": (("DNS", "*.streamingfast.io"), ("DNS", "streamingfast.io"))},
     "skip-verify.streamingfast.io"),
    ({"subject": ((("organizationName", "dfuse"),), (("commonName", "bsc.streamingfast.io"),))},
     "bsc.streamingfast.io"),
    ({"subjectAltName": (("IP Address", "10.0.0.1"),)}, "10.0.0.1"),
    ({}, "10.0.0.1"),
])
def test_certificate_target_name(certificate, expected):
    assert certificate_target_name(certificate, "10.0.0.1") == expected


def test_skip_verify_trusts_presented_certificate_under_its_name(monkeypatch):
    fetched = []

    def fetch(host, port):
        fetched.append((host, port))
        return "PEM", {"subjectAltName": (("DNS", "*.eth.streamingfast.io"),)}

    credentials = MagicMock(return_value="credentials")
    secure_channel = MagicMock()
    monkeypatch.setattr(grpc_stream, "fetch_server_certificate", fetch)
    monkeypatch.setattr(grpc, "ssl_channel_credentials", credentials)
    monkeypatch.setattr(grpc, "secure_channel", secure_channel)

    GrpcBlockStreamClient("10.0.0.1", skip_verify=True)._blocks_callable()

    assert fetched == [("10.0.0.1", 443)]
    credentials.assert_called_once_with(root_certificates=b"PEM")
    endpoint, used_credentials = secure_channel.call_args[0]
    assert endpoint == "10.0.0.1"
    assert used_credentials == "credentials"
    options = dict(secure_channel.call_args[1]["options"])
    assert options["grpc.ssl_target_name_override"] == "skip-verify.eth.streamingfast.io"


def test_unreachable_server_certificate_is_a_setup_error(monkeypatch):
    def fetch(host, port):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(grpc_stream, "fetch_server_certificate", fetch)

    with pytest.raises(StreamSetupError, match="unable to create external gRPC client"):
        GrpcBlockStreamClient("localhost:9000", skip_verify=True)._blocks_callable()
