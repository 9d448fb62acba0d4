# sfclient/clients/wire.py
"""
Protobuf schema of the blocks streaming service.

The message classes are built at import time from descriptors declared
here, so no generated *_pb2 modules are needed. Only the fields the client
reads or writes are declared, protobuf skips the rest of the payload as
unknown fields. Field numbers follow dfuse/bstream/v1/bstream.proto and
dfuse/ethereum/codec/v1/codec.proto.
"""

from google.protobuf import any_pb2, descriptor_pb2, descriptor_pool
from google.protobuf.message_factory import GetMessageClass

FieldProto = descriptor_pb2.FieldDescriptorProto

BSTREAM_PACKAGE = "dfuse.bstream.v1"
CODEC_PACKAGE = "dfuse.ethereum.codec.v1"

BLOCKS_METHOD = f"/{BSTREAM_PACKAGE}.BlockStreamV2/Blocks"
ETHEREUM_BLOCK_TYPE_URL = f"type.googleapis.com/{CODEC_PACKAGE}.Block"


def _field(name, number, field_type, type_name=None, repeated=False):
    field = FieldProto(
        name=name,
        number=number,
        type=field_type,
        label=FieldProto.LABEL_REPEATED if repeated else FieldProto.LABEL_OPTIONAL,
    )
    if type_name:
        field.type_name = type_name
    return field


def _message(file_proto, name, fields):
    message = file_proto.message_type.add(name=name)
    message.field.extend(fields)
    return message


def _enum(file_proto, name, values):
    enum = file_proto.enum_type.add(name=name)
    for value_name, number in values:
        enum.value.add(name=value_name, number=number)
    return enum


def _bstream_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="dfuse/bstream/v1/bstream.proto",
        package=BSTREAM_PACKAGE,
        syntax="proto3",
    )
    file_proto.dependency.append("google/protobuf/any.proto")

    _enum(file_proto, "ForkStep", [
        ("STEP_UNKNOWN", 0),
        ("STEP_NEW", 1),
        ("STEP_UNDO", 2),
        ("STEP_IRREVERSIBLE", 4),
    ])
    _enum(file_proto, "BlockDetails", [
        ("BLOCK_DETAILS_FULL", 0),
        ("BLOCK_DETAILS_LIGHT", 1),
    ])

    _message(file_proto, "BlocksRequestV2", [
        _field("start_block_num", 1, FieldProto.TYPE_INT64),
        _field("stop_block_num", 5, FieldProto.TYPE_UINT64),
        _field("fork_steps", 8, FieldProto.TYPE_ENUM, f".{BSTREAM_PACKAGE}.ForkStep", repeated=True),
        _field("include_filter_expr", 10, FieldProto.TYPE_STRING),
        _field("start_cursor", 13, FieldProto.TYPE_STRING),
        _field("details", 15, FieldProto.TYPE_ENUM, f".{BSTREAM_PACKAGE}.BlockDetails"),
    ])
    _message(file_proto, "BlockResponseV2", [
        _field("block", 1, FieldProto.TYPE_MESSAGE, ".google.protobuf.Any"),
        _field("step", 6, FieldProto.TYPE_ENUM, f".{BSTREAM_PACKAGE}.ForkStep"),
        _field("cursor", 10, FieldProto.TYPE_STRING),
    ])
    return file_proto


def _codec_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="dfuse/ethereum/codec/v1/codec.proto",
        package=CODEC_PACKAGE,
        syntax="proto3",
    )

    _message(file_proto, "BigInt", [
        _field("bytes", 1, FieldProto.TYPE_BYTES),
    ])
    _message(file_proto, "BlockHeader", [
        _field("parent_hash", 1, FieldProto.TYPE_BYTES),
        _field("number", 9, FieldProto.TYPE_UINT64),
        _field("hash", 16, FieldProto.TYPE_BYTES),
    ])
    _message(file_proto, "ERC20TransferEvent", [
        _field("from", 1, FieldProto.TYPE_BYTES),
        _field("to", 2, FieldProto.TYPE_BYTES),
        _field("amount", 3, FieldProto.TYPE_MESSAGE, f".{CODEC_PACKAGE}.BigInt"),
    ])
    _message(file_proto, "Call", [
        _field("index", 1, FieldProto.TYPE_UINT32),
        _field("address", 6, FieldProto.TYPE_BYTES),
        _field("erc20_transfer_events", 41, FieldProto.TYPE_MESSAGE,
               f".{CODEC_PACKAGE}.ERC20TransferEvent", repeated=True),
    ])
    _message(file_proto, "TransactionTrace", [
        _field("to", 1, FieldProto.TYPE_BYTES),
        _field("index", 20, FieldProto.TYPE_UINT32),
        _field("hash", 21, FieldProto.TYPE_BYTES),
        _field("from", 22, FieldProto.TYPE_BYTES),
        _field("calls", 32, FieldProto.TYPE_MESSAGE, f".{CODEC_PACKAGE}.Call", repeated=True),
    ])
    _message(file_proto, "Block", [
        _field("hash", 2, FieldProto.TYPE_BYTES),
        _field("number", 3, FieldProto.TYPE_UINT64),
        _field("header", 5, FieldProto.TYPE_MESSAGE, f".{CODEC_PACKAGE}.BlockHeader"),
        _field("transaction_traces", 10, FieldProto.TYPE_MESSAGE,
               f".{CODEC_PACKAGE}.TransactionTrace", repeated=True),
    ])
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(any_pb2.DESCRIPTOR.serialized_pb)
_pool.AddSerializedFile(_bstream_file().SerializeToString())
_pool.AddSerializedFile(_codec_file().SerializeToString())


def message_class(full_name: str):
    return GetMessageClass(_pool.FindMessageTypeByName(full_name))


BlocksRequestV2 = message_class(f"{BSTREAM_PACKAGE}.BlocksRequestV2")
BlockResponseV2 = message_class(f"{BSTREAM_PACKAGE}.BlockResponseV2")

CodecBlock = message_class(f"{CODEC_PACKAGE}.Block")
CodecBlockHeader = message_class(f"{CODEC_PACKAGE}.BlockHeader")
CodecTransactionTrace = message_class(f"{CODEC_PACKAGE}.TransactionTrace")
CodecCall = message_class(f"{CODEC_PACKAGE}.Call")
CodecTransferEvent = message_class(f"{CODEC_PACKAGE}.ERC20TransferEvent")
CodecBigInt = message_class(f"{CODEC_PACKAGE}.BigInt")
