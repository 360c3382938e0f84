"""
Server listing CLI for clusterscan.

Runs one scatter-gather status collection and renders the results:
- per-server overview, ranked by a chosen key, with a totals row
- per-cluster overview with gateway and connection totals
- or the raw records as JSON
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from ..core.aggregator import AggregateSnapshot, Aggregator
from ..core.collector import ReplyCollector
from ..core.ranking import SortKey, rank
from ..core.report import (
    ClusterOverview,
    ServerOverview,
    compose_cluster_overview,
    compose_server_overview,
)
from ..core.serialization import JsonSerializer
from ..transport.interfaces import ScatterTransport

NUMERIC_SERVER_COLUMNS = frozenset(
    {"Conns", "Subs", "Routes", "GWs", "Mem", "CPU %", "Cores", "Slow", "Uptime", "RTT"}
)


@dataclass(frozen=True, slots=True)
class ListingOptions:
    expect: int = 0
    json: bool = False
    sort: SortKey = SortKey.NAME
    reverse: bool = False
    compact: bool = True
    timeout: float = 5.0


class ServerListCLI:
    """Collects server status and renders it with rich."""

    def __init__(self, transport: ScatterTransport, console: Console | None = None):
        self.transport = transport
        self.console = console or Console()

    async def collect(self, options: ListingOptions) -> AggregateSnapshot:
        aggregator = Aggregator()
        collector = ReplyCollector(self.transport, aggregator)
        await collector.collect(options.expect, options.timeout)
        return aggregator.snapshot()

    async def list_servers(self, options: ListingOptions) -> AggregateSnapshot:
        snapshot = await self.collect(options)

        if options.json:
            # arrival order, like the classic listing
            self.print_json(snapshot)
            return snapshot

        ranked = rank(snapshot.records, options.sort, options.reverse)
        self.display_server_overview(
            compose_server_overview(ranked, snapshot, compact=options.compact)
        )

        clusters = compose_cluster_overview(snapshot)
        if clusters is not None:
            self.console.print()
            self.display_cluster_overview(clusters)

        return snapshot

    def print_json(self, snapshot: AggregateSnapshot) -> None:
        payload = JsonSerializer(indent=True).serialize(snapshot.records)
        self.console.print_json(payload.decode("utf-8"))

    def display_server_overview(self, overview: ServerOverview) -> None:
        table = Table(title=overview.title)
        for header in overview.headers:
            if header in NUMERIC_SERVER_COLUMNS:
                table.add_column(header, justify="right")
            elif header == "Name":
                table.add_column(header, style="cyan", no_wrap=True)
            else:
                table.add_column(header)

        for i, row in enumerate(overview.rows):
            table.add_row(*row, end_section=i == len(overview.rows) - 1)
        table.add_row(*overview.totals, style="bold")

        self.console.print(table)

    def display_cluster_overview(self, overview: ClusterOverview) -> None:
        table = Table(title=overview.title)
        table.add_column(overview.headers[0], style="magenta", no_wrap=True)
        for header in overview.headers[1:]:
            table.add_column(header, justify="right")

        for i, row in enumerate(overview.rows):
            table.add_row(*row, end_section=i == len(overview.rows) - 1)
        table.add_row(*overview.totals, style="bold")

        self.console.print(table)
