"""
Status relay server.

Agents connect and register the subjects they answer. Clients connect and
scatter a request on a subject; the relay forwards it to every registered
agent and routes each agent's reply back to the client that asked.
"""

from __future__ import annotations

import contextlib

from loguru import logger
from pydantic import ValidationError
from websockets.asyncio.server import Server, ServerConnection, broadcast, serve
from websockets.exceptions import ConnectionClosed

from clusterscan.datastructures.type_aliases import HostAddress, PortNumber, RequestId

from .messages import (
    RelayRegister,
    RelayReply,
    RelayRequest,
    RelayScatter,
    parse_envelope,
)

MAX_FRAME_SIZE = 2**20


class StatusRelay:
    """Fan-out hub between listing clients and status agents."""

    def __init__(
        self, host: HostAddress = "127.0.0.1", port: PortNumber = 4250
    ) -> None:
        self.host = host
        self.requested_port = port
        self._agents: dict[ServerConnection, tuple[str, ...]] = {}
        self._pending: dict[RequestId, ServerConnection] = {}
        self._server: Server | None = None

    @property
    def port(self) -> PortNumber:
        """The bound port (useful when started on port 0)."""
        if self._server is None:
            return self.requested_port
        return self._server.sockets[0].getsockname()[1]

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"

    @property
    def agent_count(self) -> int:
        return len(self._agents)

    async def start(self) -> None:
        self._server = await serve(
            self._handle, self.host, self.requested_port, max_size=MAX_FRAME_SIZE
        )
        logger.info("Status relay listening on {}", self.url)

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        self._agents.clear()
        self._pending.clear()
        logger.info("Status relay stopped")

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def _handle(self, websocket: ServerConnection) -> None:
        request_ids: set[RequestId] = set()
        try:
            async for frame in websocket:
                try:
                    envelope = parse_envelope(frame)
                except ValidationError as e:
                    logger.warning(
                        "[{}] Ignoring invalid frame: {}", websocket.remote_address, e
                    )
                    continue

                if isinstance(envelope, RelayRegister):
                    self._agents[websocket] = envelope.subjects
                    logger.info(
                        "Agent {} registered for {}",
                        envelope.name,
                        ", ".join(envelope.subjects),
                    )
                elif isinstance(envelope, RelayScatter):
                    request_ids.add(envelope.u)
                    self._pending[envelope.u] = websocket
                    self._fan_out(envelope)
                elif isinstance(envelope, RelayReply):
                    await self._route_reply(envelope)
                else:
                    logger.warning(
                        "[{}] Unexpected {} frame from peer",
                        websocket.remote_address,
                        envelope.role,
                    )
        except ConnectionClosed as e:
            logger.debug("[{}] Connection closed: {}", websocket.remote_address, e)
        finally:
            self._agents.pop(websocket, None)
            for request_id in request_ids:
                self._pending.pop(request_id, None)

    def _fan_out(self, scatter: RelayScatter) -> None:
        targets = [
            agent
            for agent, subjects in self._agents.items()
            if scatter.subject in subjects
        ]
        logger.debug(
            "Forwarding {} on {} to {} agents", scatter.u, scatter.subject, len(targets)
        )
        request = RelayRequest(u=scatter.u, subject=scatter.subject, data=scatter.data)
        broadcast(targets, request.model_dump_json())

    async def _route_reply(self, reply: RelayReply) -> None:
        requester = self._pending.get(reply.u)
        if requester is None:
            logger.debug("Dropping reply for unknown request {}", reply.u)
            return
        with contextlib.suppress(ConnectionClosed):
            await requester.send(reply.model_dump_json())
