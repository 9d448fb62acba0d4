# sfclient/stream/ranges.py
"""
Block range resolution for the positional <start_block> <end_block> arguments.

A negative start is kept as is, the remote service resolves it relative to
the chain head.
"""

import re
from typing import Sequence

from ..core.exceptions import InvalidArgument
from ..types import BlockRange
from ..types.constants import INT64_MIN, INT64_MAX, UINT64_MAX

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")


def parse_int64(value: str) -> int:
    if not _INT_RE.fullmatch(value or ""):
        raise ValueError(f"{value!r} is not an integer")
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"{value!r} is out of int64 range")
    return number


def parse_uint64(value: str) -> int:
    if not _UINT_RE.fullmatch(value or ""):
        raise ValueError(f"{value!r} is not an unsigned integer")
    number = int(value)
    if number > UINT64_MAX:
        raise ValueError(f"{value!r} is out of uint64 range")
    return number


def resolve_block_range(args: Sequence[str]) -> BlockRange:
    """
    Convert zero, one or two positional values into a BlockRange.

    Args:
        args: Raw <start_block> and optional <end_block> values

    Returns:
        The resolved range, zero valued when no argument was given

    Raises:
        InvalidArgument: On unparsable values, start >= end or more than two values
    """
    if len(args) == 0:
        return BlockRange()

    if len(args) > 2:
        raise InvalidArgument(f"expecting at most 2 <range> values, got {len(args)}", argument="range")

    try:
        start = parse_int64(args[0])
    except ValueError:
        raise InvalidArgument(f"the <range> start value {args[0]!r} is not a valid int64 value", argument="start_block")

    if len(args) == 1:
        return BlockRange(start=start)

    try:
        end = parse_uint64(args[1])
    except ValueError:
        raise InvalidArgument(f"the <range> end value {args[1]!r} is not a valid uint64 value", argument="end_block")

    if start >= end:
        raise InvalidArgument(
            f"the <range> start value {args[0]!r} value comes after end value {args[1]!r}",
            argument="range",
        )

    return BlockRange(start=start, end=end)
