"""
Report composition for server listings.

Turns ranked records and aggregate rollups into fully formatted table rows,
including totals rows, so that renderers only have to lay them out. Also
produces the machine-readable document used for JSON output.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

from .aggregator import AggregateSnapshot
from .compact import compact_strings
from .formatting import (
    format_count,
    format_duration,
    format_ibytes,
    format_percent,
    format_rtt,
)
from .model import StatusRecord

SERVER_HEADERS: tuple[str, ...] = (
    "Name",
    "Cluster",
    "Host",
    "Version",
    "JS",
    "Conns",
    "Subs",
    "Routes",
    "GWs",
    "Mem",
    "CPU %",
    "Cores",
    "Slow",
    "Uptime",
    "RTT",
)

CLUSTER_HEADERS: tuple[str, ...] = (
    "Cluster",
    "Node Count",
    "Outgoing Gateways",
    "Incoming Gateways",
    "Connections",
)

Row: TypeAlias = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ServerOverview:
    title: str
    headers: tuple[str, ...]
    rows: tuple[Row, ...]
    totals: Row


@dataclass(frozen=True, slots=True)
class ClusterOverview:
    title: str
    headers: tuple[str, ...]
    rows: tuple[Row, ...]
    totals: Row


def jetstream_indicator(record: StatusRecord) -> str:
    if not record.jetstream_enabled:
        return "no"
    return record.domain or "yes"


def compose_server_overview(
    ranked: Sequence[StatusRecord],
    snapshot: AggregateSnapshot,
    *,
    compact: bool = True,
) -> ServerOverview:
    """Build the per-server table in ranked order plus its totals row."""
    names = [r.server_name for r in ranked]
    hosts = [r.host for r in ranked]
    if compact:
        names = compact_strings(names)
        hosts = compact_strings(hosts)

    rows = tuple(
        (
            names[i],
            record.cluster_name,
            hosts[i],
            record.version,
            jetstream_indicator(record),
            format_count(record.connections),
            format_count(record.subscriptions),
            str(record.route_count),
            str(record.gateway_count),
            format_ibytes(record.memory_bytes),
            format_percent(record.cpu_percent),
            str(record.core_count),
            str(record.slow_consumer_count),
            format_duration(record.uptime),
            format_rtt(record.round_trip_time),
        )
        for i, record in enumerate(ranked)
    )

    rollup = snapshot.rollup
    totals = (
        "",
        str(snapshot.cluster_count),
        str(rollup.server_count),
        "",
        str(rollup.jetstream_server_count),
        format_count(rollup.connection_total),
        format_count(rollup.subscription_total),
        "",
        "",
        format_ibytes(rollup.memory_total),
        "",
        "",
        format_count(rollup.slow_consumer_total),
        "",
        "",
    )

    return ServerOverview(
        title="Server Overview", headers=SERVER_HEADERS, rows=rows, totals=totals
    )


def compose_cluster_overview(snapshot: AggregateSnapshot) -> ClusterOverview | None:
    """Build the per-cluster table, least connected first; None without clusters."""
    if not snapshot.clusters:
        return None

    clusters = sorted(snapshot.clusters, key=lambda c: c.connection_total)

    rows = tuple(
        (
            cluster.name,
            str(cluster.node_count),
            str(cluster.gateway_out_total),
            str(cluster.gateway_in_total),
            str(cluster.connection_total),
        )
        for cluster in clusters
    )
    totals = (
        "",
        str(sum(c.node_count for c in clusters)),
        str(sum(c.gateway_out_total for c in clusters)),
        str(sum(c.gateway_in_total for c in clusters)),
        str(sum(c.connection_total for c in clusters)),
    )

    return ClusterOverview(
        title="Cluster Overview", headers=CLUSTER_HEADERS, rows=rows, totals=totals
    )
