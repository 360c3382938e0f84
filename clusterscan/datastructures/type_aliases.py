"""
Semantic type aliases for clusterscan.

Meaningful names for the raw str/int/float values that flow between the
collector, aggregator, ranking and report layers.
"""

from collections.abc import Callable
from typing import Any, TypeAlias

# Time types
DurationSeconds: TypeAlias = float

# Identity types
ServerName: TypeAlias = str
ClusterName: TypeAlias = str
HostName: TypeAlias = str
Subject: TypeAlias = str
RequestId: TypeAlias = str

# Size types
ByteSize: TypeAlias = int
Percentage: TypeAlias = float

# Network types
HostAddress: TypeAlias = str
PortNumber: TypeAlias = int
UrlString: TypeAlias = str

# Wire types
RawPayload: TypeAlias = bytes
ReplyHandler: TypeAlias = Callable[[bytes], None]
JsonDict: TypeAlias = dict[str, Any]
