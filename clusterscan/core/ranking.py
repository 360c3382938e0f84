"""
Ranking of collected status records.

Metric keys sort highest-first unless the caller asks for ``reverse``, in
which case they sort lowest-first. ``reverse`` therefore means "do not apply
the default descending order"; callers that prefer an explicit direction use
:func:`rank_by` with a :class:`SortDirection`. The ``name`` key always sorts
ascending. Every ordering is stable: ties keep their arrival order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum, StrEnum
from typing import TypeAlias

from .model import StatusRecord

SortValue: TypeAlias = str | int | float


class SortKey(StrEnum):
    NAME = "name"
    CONNS = "conns"
    CONN = "conn"
    SUBS = "subs"
    SUB = "sub"
    ROUTES = "routes"
    ROUTE = "route"
    GWS = "gws"
    GW = "gw"
    MEM = "mem"
    CPU = "cpu"
    SLOW = "slow"
    UPTIME = "uptime"
    RTT = "rtt"

    @classmethod
    def parse(cls, value: str | SortKey) -> SortKey:
        """Map a user-supplied key to a SortKey, falling back to round-trip time."""
        try:
            return cls(value)
        except ValueError:
            return cls.RTT


class SortDirection(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def from_reverse_flag(cls, reverse: bool) -> SortDirection:
        return cls.ASCENDING if reverse else cls.DESCENDING


_METRICS: dict[SortKey, Callable[[StatusRecord], SortValue]] = {
    SortKey.CONNS: lambda r: r.connections,
    SortKey.CONN: lambda r: r.connections,
    SortKey.SUBS: lambda r: r.subscriptions,
    SortKey.SUB: lambda r: r.subscriptions,
    SortKey.ROUTES: lambda r: r.route_count,
    SortKey.ROUTE: lambda r: r.route_count,
    SortKey.GWS: lambda r: r.gateway_count,
    SortKey.GW: lambda r: r.gateway_count,
    SortKey.MEM: lambda r: r.memory_bytes,
    SortKey.CPU: lambda r: r.cpu_percent,
    SortKey.SLOW: lambda r: r.slow_consumer_count,
    # longest running first when descending
    SortKey.UPTIME: lambda r: -r.process_start_time.timestamp(),
    SortKey.RTT: lambda r: r.round_trip_time,
}


def rank_by(
    records: Iterable[StatusRecord],
    sort_key: str | SortKey,
    direction: SortDirection,
) -> tuple[StatusRecord, ...]:
    key = SortKey.parse(sort_key)
    if key is SortKey.NAME:
        return tuple(sorted(records, key=lambda r: r.server_name))

    return tuple(
        sorted(
            records,
            key=_METRICS[key],
            reverse=direction is SortDirection.DESCENDING,
        )
    )


def rank(
    records: Iterable[StatusRecord],
    sort_key: str | SortKey = SortKey.NAME,
    reverse: bool = False,
) -> tuple[StatusRecord, ...]:
    """Order records for display; never mutates the records."""
    return rank_by(records, sort_key, SortDirection.from_reverse_flag(reverse))
