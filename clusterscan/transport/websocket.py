"""Websocket client transport that scatters requests through a status relay."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import ulid
from loguru import logger
from pydantic import ValidationError
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from clusterscan.datastructures.type_aliases import (
    ReplyHandler,
    RequestId,
    Subject,
    UrlString,
)

from .interfaces import TransportConnectionError
from .messages import RelayReply, RelayScatter, parse_envelope

MAX_FRAME_SIZE = 2**20


@dataclass(slots=True)
class WebSocketScatterTransport:
    # websocket URL like: ws://127.0.0.1:4250
    url: UrlString
    open_timeout: float = 5.0

    @asynccontextmanager
    async def scatter(
        self, subject: Subject, payload: bytes, on_reply: ReplyHandler
    ) -> AsyncIterator[None]:
        try:
            websocket = await connect(
                self.url,
                open_timeout=self.open_timeout,
                max_size=MAX_FRAME_SIZE,
            )
        except (OSError, TimeoutError, InvalidHandshake, InvalidURI) as e:
            raise TransportConnectionError(
                f"Failed to connect to {self.url}: {e}"
            ) from e

        request = RelayScatter(
            u=str(ulid.new()), subject=subject, data=payload.decode("utf-8")
        )
        listener = asyncio.create_task(self._listen(websocket, request.u, on_reply))
        try:
            await websocket.send(request.model_dump_json())
            logger.debug("[{}] Scattered {} on {}", self.url, request.u, subject)
            yield
        finally:
            listener.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await listener
            await websocket.close()

    async def _listen(
        self,
        websocket: ClientConnection,
        request_id: RequestId,
        on_reply: ReplyHandler,
    ) -> None:
        try:
            async for frame in websocket:
                try:
                    envelope = parse_envelope(frame)
                except ValidationError as e:
                    logger.warning("[{}] Ignoring invalid relay frame: {}", self.url, e)
                    continue

                if isinstance(envelope, RelayReply) and envelope.u == request_id:
                    on_reply(envelope.data.encode("utf-8"))
        except ConnectionClosed as e:
            logger.debug("[{}] Relay connection closed: {}", self.url, e)
