"""
Reply collection for a single scatter-gather status request.

The collector sends one request, stamps every reply with its round-trip time,
hands it to the aggregator and decides when the collection window closes:
after ``expected_count`` replies, or when ``timeout`` elapses.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TypeAlias

from loguru import logger

from clusterscan.datastructures.type_aliases import DurationSeconds, Subject
from clusterscan.transport.interfaces import ScatterTransport

from .aggregator import Aggregator
from .errors import DecodeFailureError, NoResultsError
from .model import SERVER_PING_SUBJECT, ServerStatsMessage, StatusRecord, decode_status

StatusDecoder: TypeAlias = Callable[[bytes], ServerStatsMessage]


class ReplyCollector:
    """Collects an a-priori unknown number of status replies into an aggregator."""

    def __init__(
        self,
        transport: ScatterTransport,
        aggregator: Aggregator,
        *,
        subject: Subject = SERVER_PING_SUBJECT,
        decoder: StatusDecoder = decode_status,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.transport = transport
        self.aggregator = aggregator
        self.subject = subject
        self.decoder = decoder
        self.clock = clock
        self._failure: DecodeFailureError | None = None

    async def collect(
        self, expected_count: int = 0, timeout: DurationSeconds = 5.0
    ) -> tuple[StatusRecord, ...]:
        """Run one collection window and return the accepted records.

        Raises:
            DecodeFailureError: A reply could not be decoded; the run is aborted.
            NoResultsError: No reply arrived before the window closed.
        """
        loop = asyncio.get_running_loop()
        done = asyncio.Event()
        self._failure = None
        start = self.clock()

        def on_reply(data: bytes) -> None:
            if self.aggregator.sealed:
                return

            try:
                message = self.decoder(data)
            except Exception as e:  # any decoder failure aborts the run
                if self._failure is None:
                    self._failure = DecodeFailureError(data, e)
                self.aggregator.seal()
                loop.call_soon_threadsafe(done.set)
                return

            record = StatusRecord.from_message(
                message, round_trip_time=self.clock() - start
            )
            accepted = self.aggregator.on_record(record, limit=expected_count)
            if accepted and self.aggregator.sealed:
                loop.call_soon_threadsafe(done.set)

        logger.debug(
            "Requesting status on {} (expecting {}, timeout {:.2f}s)",
            self.subject,
            expected_count or "unknown",
            timeout,
        )

        async with self.transport.scatter(self.subject, b"", on_reply):
            try:
                await asyncio.wait_for(done.wait(), timeout=timeout)
            except TimeoutError:
                logger.debug("Collection window of {:.2f}s elapsed", timeout)
            finally:
                self.aggregator.seal()

        if self._failure is not None:
            logger.error("{}", self._failure)
            raise self._failure

        records = self.aggregator.snapshot().records
        logger.debug(
            "Collected {} replies in {:.3f}s", len(records), self.clock() - start
        )
        if not records:
            raise NoResultsError()

        return records
