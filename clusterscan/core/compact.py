"""Shorten display columns by eliding the dotted suffix every value shares."""

from __future__ import annotations

import ipaddress
from collections.abc import Sequence


def _is_ip_literal(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _shared_suffix_length(parts: Sequence[Sequence[str]]) -> int:
    # the first label of every value is always kept
    limit = min(len(p) for p in parts) - 1
    length = 0
    while length < limit:
        label = parts[0][-1 - length]
        if any(p[-1 - length] != label for p in parts):
            break
        length += 1
    return length


def compact_strings(values: Sequence[str]) -> list[str]:
    """Drop the longest dotted suffix shared by all values.

    ``["n1.east.example.com", "n2.east.example.com"]`` becomes ``["n1", "n2"]``.
    The result has the same length and order as the input. IP literals are
    never shortened, and when shortening would make two distinct values
    identical the input is returned unchanged.
    """
    if not values or any(_is_ip_literal(v) for v in values):
        return list(values)

    parts = [v.split(".") for v in values]
    suffix = _shared_suffix_length(parts)
    if suffix == 0:
        return list(values)

    compacted = [".".join(p[:-suffix]) for p in parts]
    if len(set(compacted)) != len(set(values)):
        return list(values)

    return compacted
