"""Pytest configuration and fixtures for clusterscan testing.

Provides factories for status payloads and records, and an in-process scatter
transport wired to canned responders so collection runs without a network.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import orjson
import pytest

from clusterscan.core.model import SERVER_PING_SUBJECT, StatusRecord
from clusterscan.transport.in_process import InProcessScatterTransport

REPORT_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def build_status_payload(
    name: str,
    *,
    host: str | None = None,
    cluster: str = "",
    domain: str = "",
    jetstream: bool = False,
    version: str = "2.10.0",
    connections: int = 0,
    subscriptions: int = 0,
    mem: int = 0,
    cpu: float = 0.0,
    cores: int = 4,
    slow_consumers: int = 0,
    routes: int = 0,
    gateways: tuple[int, ...] = (),
    uptime: timedelta = timedelta(hours=1),
) -> dict[str, Any]:
    """Build a status reply document; ``gateways`` lists inbound counts per gateway."""
    return {
        "server": {
            "name": name,
            "host": host if host is not None else f"{name}.example.com",
            "id": f"id-{name}",
            "cluster": cluster,
            "domain": domain,
            "ver": version,
            "jetstream": jetstream,
            "seq": 1,
            "time": REPORT_TIME.isoformat(),
        },
        "statsz": {
            "start": (REPORT_TIME - uptime).isoformat(),
            "mem": mem,
            "cores": cores,
            "cpu": cpu,
            "connections": connections,
            "total_connections": connections,
            "subscriptions": subscriptions,
            "slow_consumers": slow_consumers,
            "routes": [{"rid": i, "name": f"route-{i}"} for i in range(routes)],
            "gateways": [
                {"gwid": i, "name": f"gw-{i}", "inbound_connections": inbound}
                for i, inbound in enumerate(gateways)
            ],
        },
    }


def build_record(
    name: str,
    *,
    cluster: str = "",
    connections: int = 0,
    subscriptions: int = 0,
    routes: int = 0,
    gateways: int = 0,
    gateway_inbound: int = 0,
    mem: int = 0,
    cpu: float = 0.0,
    slow: int = 0,
    jetstream: bool = False,
    domain: str = "",
    uptime: timedelta = timedelta(hours=1),
    rtt: float = 0.01,
    host: str | None = None,
) -> StatusRecord:
    return StatusRecord(
        server_name=name,
        host=host if host is not None else f"{name}.example.com",
        version="2.10.0",
        cluster_name=cluster,
        domain=domain,
        jetstream_enabled=jetstream,
        connections=connections,
        subscriptions=subscriptions,
        route_count=routes,
        gateway_count=gateways,
        gateway_inbound_total=gateway_inbound,
        memory_bytes=mem,
        cpu_percent=cpu,
        core_count=4,
        slow_consumer_count=slow,
        process_start_time=REPORT_TIME - uptime,
        report_time=REPORT_TIME,
        round_trip_time=rtt,
    )


@pytest.fixture
def status_payload() -> Callable[..., dict[str, Any]]:
    return build_status_payload


@pytest.fixture
def make_record() -> Callable[..., StatusRecord]:
    return build_record


@pytest.fixture
def scatter_transport() -> Callable[..., InProcessScatterTransport]:
    """Factory for an in-process transport answering with the given documents."""

    def factory(*documents: dict[str, Any] | bytes) -> InProcessScatterTransport:
        transport = InProcessScatterTransport()
        for document in documents:
            data = document if isinstance(document, bytes) else orjson.dumps(document)
            transport.subscribe(SERVER_PING_SUBJECT, lambda _req, data=data: data)
        return transport

    return factory
