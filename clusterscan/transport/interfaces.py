"""
Transport interfaces for scatter-gather requests.

A scatter transport sends one fan-out request and delivers every reply it
receives to a callback until the caller leaves the scatter context. Replies may
be delivered from the event loop or from worker threads.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable

from clusterscan.datastructures.type_aliases import ReplyHandler, Subject


class TransportError(Exception):
    """Base exception for transport-related errors."""

    pass


class TransportConnectionError(TransportError):
    """Raised when the transport cannot reach the fan-out endpoint."""

    pass


@runtime_checkable
class ScatterTransport(Protocol):
    def scatter(
        self, subject: Subject, payload: bytes, on_reply: ReplyHandler
    ) -> AbstractAsyncContextManager[None]: ...
