# sfclient/stream/filter.py
"""
Recovers the literal addresses named by an `in [...]` test of a filter expression.

The expression itself is never evaluated here, the remote service applies it.
Only the literal list is needed to know which call targets to scan locally.
"""

import re
from typing import FrozenSet, List

from ..types import EvmAddress
from ..utils.addresses import normalize_address

_IN_LIST_RE = re.compile(r"in \[(.*?)\]")
_QUOTES = "'\""


def extract_filter_addresses(filter_expr: str) -> List[str]:
    """
    Return the literals of the first `in [...]` list, in order.

    >>> extract_filter_addresses("to in ['0xa','0xb']")
    ['0xa', '0xb']
    """
    if not filter_expr:
        return []

    match = _IN_LIST_RE.search(filter_expr)
    if not match:
        return []

    literals = []
    for item in match.group(1).split(","):
        literal = item.strip().strip(_QUOTES).strip()
        if literal:
            literals.append(literal)
    return literals


def tracked_address_set(filter_expr: str) -> FrozenSet[EvmAddress]:
    return frozenset(normalize_address(a) for a in extract_filter_addresses(filter_expr))

