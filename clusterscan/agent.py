"""
Status agent.

Runs next to a server process, registers with the status relay, and answers
every status ping with a status message describing the local process.
"""

from __future__ import annotations

import itertools
import socket
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import psutil
from loguru import logger
from pydantic import ValidationError
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from clusterscan import __version__
from clusterscan.core.model import (
    SERVER_PING_SUBJECT,
    GatewayStat,
    RouteStat,
    ServerInfo,
    ServerStats,
    ServerStatsMessage,
)
from clusterscan.datastructures.type_aliases import ByteSize, Percentage, Subject
from clusterscan.transport.interfaces import TransportConnectionError
from clusterscan.transport.messages import (
    RelayRegister,
    RelayReply,
    RelayRequest,
    parse_envelope,
)


@dataclass(frozen=True, slots=True)
class AgentIdentity:
    """Static identity an agent reports for the server it represents."""

    name: str
    host: str
    cluster: str = ""
    domain: str = ""
    jetstream: bool = False
    version: str = __version__
    server_id: str = ""
    routes: tuple[RouteStat, ...] = ()
    gateways: tuple[GatewayStat, ...] = ()

    @classmethod
    def local(
        cls,
        name: str | None = None,
        *,
        cluster: str = "",
        domain: str = "",
        jetstream: bool = False,
    ) -> AgentIdentity:
        host = socket.gethostname()
        return cls(
            name=name or host,
            host=host,
            cluster=cluster,
            domain=domain,
            jetstream=jetstream,
            server_id=uuid.uuid4().hex,
        )


@dataclass(frozen=True, slots=True)
class ProcessSample:
    memory_bytes: ByteSize
    cpu_percent: Percentage
    core_count: int
    start_time: datetime
    connections: int


class StatusSource(Protocol):
    def sample(self) -> ProcessSample: ...


class ProcessStatusSource:
    """Samples a process with psutil."""

    def __init__(self, process: psutil.Process | None = None) -> None:
        self.process = process or psutil.Process()
        # first call primes the CPU counters and always returns 0.0
        self.process.cpu_percent(None)

    def sample(self) -> ProcessSample:
        with self.process.oneshot():
            memory = self.process.memory_info().rss
            cpu = self.process.cpu_percent(None)
            started = datetime.fromtimestamp(self.process.create_time(), UTC)
            try:
                connections = len(self.process.net_connections(kind="inet"))
            except psutil.AccessDenied:
                connections = 0

        return ProcessSample(
            memory_bytes=memory,
            cpu_percent=cpu,
            core_count=psutil.cpu_count() or 0,
            start_time=started,
            connections=connections,
        )


class StatusAgent:
    """Answers status pings relayed from listing clients."""

    def __init__(
        self,
        url: str,
        identity: AgentIdentity,
        source: StatusSource | None = None,
        *,
        subject: Subject = SERVER_PING_SUBJECT,
    ) -> None:
        self.url = url
        self.identity = identity
        self.source: StatusSource = source or ProcessStatusSource()
        self.subject = subject
        self._seq = itertools.count(1)

    def build_status(self) -> ServerStatsMessage:
        sample = self.source.sample()
        identity = self.identity
        return ServerStatsMessage(
            server=ServerInfo(
                name=identity.name,
                host=identity.host,
                id=identity.server_id,
                cluster=identity.cluster,
                domain=identity.domain,
                version=identity.version,
                jetstream=identity.jetstream,
                seq=next(self._seq),
                time=datetime.now(UTC),
            ),
            statsz=ServerStats(
                start=sample.start_time,
                mem=sample.memory_bytes,
                cores=sample.core_count,
                cpu=sample.cpu_percent,
                connections=sample.connections,
                routes=list(identity.routes),
                gateways=list(identity.gateways),
            ),
        )

    async def run(self) -> None:
        """Serve status requests until the relay connection closes."""
        try:
            websocket = await connect(self.url)
        except (OSError, TimeoutError, InvalidHandshake, InvalidURI) as e:
            raise TransportConnectionError(
                f"Failed to connect to {self.url}: {e}"
            ) from e

        async with websocket:
            register = RelayRegister(name=self.identity.name, subjects=(self.subject,))
            await websocket.send(register.model_dump_json())
            logger.info(
                "[{}] Agent {} answering {}", self.url, self.identity.name, self.subject
            )
            await self._serve(websocket)

    async def _serve(self, websocket: ClientConnection) -> None:
        try:
            async for frame in websocket:
                try:
                    envelope = parse_envelope(frame)
                except ValidationError as e:
                    logger.warning("[{}] Ignoring invalid relay frame: {}", self.url, e)
                    continue

                if not isinstance(envelope, RelayRequest):
                    continue

                status = self.build_status()
                reply = RelayReply(
                    u=envelope.u, data=status.model_dump_json(by_alias=True)
                )
                await websocket.send(reply.model_dump_json())
        except ConnectionClosed as e:
            logger.info("[{}] Relay connection closed: {}", self.url, e)
