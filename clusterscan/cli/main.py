#!/usr/bin/env python3
"""
Main CLI entry point for clusterscan.

Provides command-line access to:
- Server listing with cluster rollups (``server ls``)
- The status relay that fans requests out to agents (``relay``)
- A status agent answering for the local process (``agent``)
"""

import asyncio
import sys

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape

from ..agent import AgentIdentity, StatusAgent
from ..config import ClusterScanSettings
from ..core.errors import ClusterScanError
from ..core.logging import configure_logging
from ..core.ranking import SortKey
from ..transport.interfaces import TransportError
from ..transport.relay import StatusRelay
from ..transport.websocket import WebSocketScatterTransport
from .server_list import ListingOptions, ServerListCLI

console = Console()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-level", help="Log level (overrides CLUSTERSCAN_LOG_LEVEL)")
@click.pass_context
def cli(ctx, verbose: bool, log_level: str | None):
    """
    clusterscan: cluster-wide server status.

    Lists every server answering status requests, ranked and rolled up
    per cluster, and runs the relay and agents those requests travel through.
    """
    settings = ClusterScanSettings()
    level = "DEBUG" if verbose else (log_level or settings.log_level)
    configure_logging(level, debug_scopes=settings.debug_scopes, colorize=True)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


@cli.group()
def server():
    """Server status commands."""


@click.command("ls")
@click.argument("expect", type=click.IntRange(min=0), default=0)
@click.option("--json", "-j", "as_json", is_flag=True, help="Produce JSON output")
@click.option(
    "--sort",
    type=click.Choice([key.value for key in SortKey]),
    default=SortKey.NAME.value,
    help="Sort servers by a specific key",
)
@click.option("--reverse", "-R", is_flag=True, help="Reverse sort servers")
@click.option(
    "--compact/--no-compact", default=True, help="Compact server names and hosts"
)
@click.option("--timeout", "-t", type=float, help="Seconds to wait for replies")
@click.option("--server", "-s", "server_url", help="Relay websocket URL")
@click.pass_context
def list_servers(
    ctx,
    expect: int,
    as_json: bool,
    sort: str,
    reverse: bool,
    compact: bool,
    timeout: float | None,
    server_url: str | None,
):
    """List known servers.

    EXPECT is how many servers to expect; collection stops as soon as that
    many have answered instead of waiting for the full timeout.
    """
    settings: ClusterScanSettings = ctx.obj["settings"]
    options = ListingOptions(
        expect=expect,
        json=as_json,
        sort=SortKey(sort),
        reverse=reverse,
        compact=compact,
        timeout=timeout if timeout is not None else settings.timeout,
    )
    transport = WebSocketScatterTransport(server_url or settings.server_url)

    async def _list():
        listing = ServerListCLI(transport, console=console)
        await listing.list_servers(options)

    try:
        asyncio.run(_list())
    except (ClusterScanError, TransportError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)


server.add_command(list_servers)
server.add_command(list_servers, name="list")


@cli.command()
@click.option("--host", help="Address to listen on")
@click.option("--port", type=int, help="Port to listen on")
@click.pass_context
def relay(ctx, host: str | None, port: int | None):
    """Run the status relay."""
    settings: ClusterScanSettings = ctx.obj["settings"]
    status_relay = StatusRelay(
        host or settings.relay_host,
        port if port is not None else settings.relay_port,
    )

    async def _relay():
        try:
            await status_relay.serve_forever()
        finally:
            await status_relay.stop()

    asyncio.run(_relay())


@cli.command()
@click.option("--server", "-s", "server_url", help="Relay websocket URL")
@click.option("--name", help="Server name to report (default: hostname)")
@click.option("--cluster", help="Cluster name to report")
@click.option("--domain", help="JetStream domain to report")
@click.option(
    "--jetstream/--no-jetstream", default=None, help="Report JetStream as enabled"
)
@click.pass_context
def agent(
    ctx,
    server_url: str | None,
    name: str | None,
    cluster: str | None,
    domain: str | None,
    jetstream: bool | None,
):
    """Answer status requests for this process."""
    settings: ClusterScanSettings = ctx.obj["settings"]
    identity = AgentIdentity.local(
        name or settings.agent_name,
        cluster=cluster if cluster is not None else settings.agent_cluster,
        domain=domain if domain is not None else settings.agent_domain,
        jetstream=jetstream if jetstream is not None else settings.agent_jetstream,
    )
    status_agent = StatusAgent(server_url or settings.server_url, identity)

    try:
        asyncio.run(status_agent.run())
    except TransportError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)


def main():
    """Main CLI entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️ Operation cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]❌ Unexpected error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
