# tests/test_address_writer.py

import io
import sys

import pytest

from sfclient.core.exceptions import SinkWriteError
from sfclient.storage.address_writer import (
    NullAddressSink,
    StreamAddressSink,
    open_address_sink,
    resolve_output_path,
)
from sfclient.types import BlockRange, BlockRef

from conftest import ADDRESS_A, ADDRESS_B


def test_range_placeholder_is_replaced_without_spaces():
    assert resolve_output_path("out/{range}.txt", BlockRange(100, 200)) == "out/100-200.txt"


def test_dash_is_standard_output():
    sink = open_address_sink("-", BlockRange())
    assert isinstance(sink, StreamAddressSink)
    assert sink.stream is sys.stdout
    sink.close()
    assert not sys.stdout.closed


def test_empty_output_discards_addresses():
    sink = open_address_sink("", BlockRange())
    assert isinstance(sink, NullAddressSink)
    assert sink.write_addresses([ADDRESS_A]) == 1


def test_file_sink_writes_one_address_per_line(tmp_path):
    target = tmp_path / "nested" / "addresses-{range}.txt"
    with open_address_sink(str(target), BlockRange(100, 200)) as sink:
        assert sink.write_addresses([ADDRESS_A, ADDRESS_B], BlockRef(101, "aa")) == 2

    written = tmp_path / "nested" / "addresses-100-200.txt"
    assert written.read_text() == f"{ADDRESS_A}\n{ADDRESS_B}\n"
    assert sink.stream.closed


def test_file_sink_closes_once(tmp_path):
    sink = open_address_sink(str(tmp_path / "out.txt"), BlockRange())
    sink.close()
    sink.close()
    assert sink.closed


def test_write_failure_names_block_and_address():
    stream = io.StringIO()
    sink = StreamAddressSink(stream, name="memory", owns_stream=True)
    stream.close()

    with pytest.raises(SinkWriteError) as excinfo:
        sink.write_addresses([ADDRESS_A], BlockRef(101, "aa"))
    assert excinfo.value.address == ADDRESS_A
    assert excinfo.value.details["block"] == "#101 (aa)"
