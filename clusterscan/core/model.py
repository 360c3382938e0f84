"""
Wire models and status records for server status replies.

Replies arrive as JSON documents shaped like a server statistics message
(``{"server": {...}, "statsz": {...}}``). They are validated with pydantic and
flattened into an immutable :class:`StatusRecord` carrying the round-trip time
measured by the collector.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from clusterscan.datastructures.type_aliases import (
    ByteSize,
    ClusterName,
    DurationSeconds,
    HostName,
    JsonDict,
    Percentage,
    ServerName,
)

SERVER_PING_SUBJECT = "$SYS.REQ.SERVER.PING"


class RouteStat(BaseModel):
    """A single route (intra-cluster link) reported by a server."""

    model_config = ConfigDict(extra="ignore")

    rid: int = Field(0, description="Route identifier.")
    name: str = Field("", description="Name of the remote server.")
    pending: int = Field(0, description="Pending bytes on the route.")


class GatewayStat(BaseModel):
    """A single outbound gateway (inter-cluster link) reported by a server."""

    model_config = ConfigDict(extra="ignore")

    gwid: int = Field(0, description="Gateway identifier.")
    name: str = Field("", description="Name of the remote cluster.")
    inbound_connections: int = Field(
        0, description="Inbound gateway connections from the remote cluster."
    )


class ServerInfo(BaseModel):
    """Identity block of a status reply."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(description="Server name.")
    host: str = Field("", description="Host the server runs on.")
    id: str = Field("", description="Unique server identifier.")
    cluster: str = Field("", description="Cluster the server belongs to.")
    domain: str = Field("", description="JetStream domain, if any.")
    version: str = Field("", alias="ver", description="Server version.")
    jetstream: bool = Field(False, description="Whether JetStream is enabled.")
    seq: int = Field(0, description="Status message sequence number.")
    time: AwareDatetime = Field(description="When the status was produced.")


class ServerStats(BaseModel):
    """Statistics block of a status reply."""

    model_config = ConfigDict(extra="ignore")

    start: AwareDatetime = Field(description="When the server process started.")
    mem: int = Field(0, description="Resident memory in bytes.")
    cores: int = Field(0, description="Number of CPU cores.")
    cpu: float = Field(0.0, description="CPU usage percent.")
    connections: int = Field(0, ge=0, description="Current client connections.")
    total_connections: int = Field(0, ge=0, description="Connections since start.")
    subscriptions: int = Field(0, ge=0, description="Active subscriptions.")
    slow_consumers: int = Field(0, ge=0, description="Slow consumer count.")
    routes: list[RouteStat] = Field(default_factory=list)
    gateways: list[GatewayStat] = Field(default_factory=list)


class ServerStatsMessage(BaseModel):
    """A complete status reply from one server."""

    model_config = ConfigDict(extra="ignore")

    server: ServerInfo
    statsz: ServerStats


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


@dataclass(frozen=True, slots=True)
class StatusRecord:
    """One reply from one server instance, flattened for aggregation and ranking."""

    server_name: ServerName
    host: HostName
    version: str
    cluster_name: ClusterName
    domain: str
    jetstream_enabled: bool
    connections: int
    subscriptions: int
    route_count: int
    gateway_count: int
    gateway_inbound_total: int
    memory_bytes: ByteSize
    cpu_percent: Percentage
    core_count: int
    slow_consumer_count: int
    process_start_time: datetime
    report_time: datetime
    round_trip_time: DurationSeconds = 0.0

    @property
    def uptime(self) -> DurationSeconds:
        return (self.report_time - self.process_start_time).total_seconds()

    @classmethod
    def from_message(
        cls, message: ServerStatsMessage, *, round_trip_time: DurationSeconds = 0.0
    ) -> StatusRecord:
        server = message.server
        stats = message.statsz
        return cls(
            server_name=server.name,
            host=server.host,
            version=server.version,
            cluster_name=server.cluster,
            domain=server.domain,
            jetstream_enabled=server.jetstream,
            connections=stats.connections,
            subscriptions=stats.subscriptions,
            route_count=len(stats.routes),
            gateway_count=len(stats.gateways),
            gateway_inbound_total=sum(g.inbound_connections for g in stats.gateways),
            memory_bytes=stats.mem,
            cpu_percent=stats.cpu,
            core_count=stats.cores,
            slow_consumer_count=stats.slow_consumers,
            process_start_time=stats.start,
            report_time=server.time,
            round_trip_time=round_trip_time,
        )

    def to_dict(self) -> JsonDict:
        return {
            "server_name": self.server_name,
            "host": self.host,
            "version": self.version,
            "cluster_name": self.cluster_name,
            "domain": self.domain,
            "jetstream_enabled": self.jetstream_enabled,
            "connections": self.connections,
            "subscriptions": self.subscriptions,
            "route_count": self.route_count,
            "gateway_count": self.gateway_count,
            "gateway_inbound_total": self.gateway_inbound_total,
            "memory_bytes": self.memory_bytes,
            "cpu_percent": self.cpu_percent,
            "core_count": self.core_count,
            "slow_consumer_count": self.slow_consumer_count,
            "process_start_time": _isoformat(self.process_start_time),
            "report_time": _isoformat(self.report_time),
            "uptime": self.uptime,
            "round_trip_time": self.round_trip_time,
        }


def decode_status(data: bytes) -> ServerStatsMessage:
    """Decode a raw reply payload; raises ``pydantic.ValidationError`` on bad input."""
    return ServerStatsMessage.model_validate_json(data)
