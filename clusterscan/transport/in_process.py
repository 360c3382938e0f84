"""In-process scatter transport (test/local use)."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import AsyncIterator, Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TypeAlias

from loguru import logger

from clusterscan.datastructures.type_aliases import ReplyHandler, Subject

Responder: TypeAlias = Callable[[bytes], bytes | None]


@dataclass(slots=True)
class InProcessScatterTransport:
    """Fans a request out to local responders, each on its own worker thread.

    A responder returning None stays silent, like a server that never answers.
    Replies from responders still running when the scatter context exits are
    delivered late and are expected to be ignored by the caller.
    """

    max_workers: int = 8
    _responders: dict[Subject, list[Responder]] = field(
        default_factory=lambda: defaultdict(list)
    )

    def subscribe(self, subject: Subject, responder: Responder) -> None:
        self._responders[subject].append(responder)

    @asynccontextmanager
    async def scatter(
        self, subject: Subject, payload: bytes, on_reply: ReplyHandler
    ) -> AsyncIterator[None]:
        responders = list(self._responders.get(subject, ()))
        executor = ThreadPoolExecutor(
            max_workers=max(1, min(self.max_workers, len(responders) or 1)),
            thread_name_prefix="scatter",
        )

        def run(responder: Responder) -> None:
            try:
                reply = responder(payload)
            except Exception as e:
                logger.warning("Responder on {} failed: {}", subject, e)
                return
            if reply is None:
                return
            try:
                on_reply(reply)
            except Exception:
                logger.exception("Reply handler on {} failed", subject)

        logger.debug("Scattering {} to {} local responders", subject, len(responders))
        try:
            for responder in responders:
                executor.submit(run, responder)
            yield
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
