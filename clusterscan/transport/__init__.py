"""
clusterscan transports

Scatter-gather delivery of status requests: the transport protocol, an
in-process implementation, and a websocket client/relay pair.
"""

from __future__ import annotations

from .interfaces import ScatterTransport, TransportConnectionError, TransportError
from .in_process import InProcessScatterTransport
from .relay import StatusRelay
from .websocket import WebSocketScatterTransport

__all__ = [
    "InProcessScatterTransport",
    "ScatterTransport",
    "StatusRelay",
    "TransportConnectionError",
    "TransportError",
    "WebSocketScatterTransport",
]
