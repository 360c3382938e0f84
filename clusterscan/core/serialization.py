"""JSON encoding of listing output."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any

import orjson

from .aggregator import AggregateSnapshot, ClusterRollup
from .model import StatusRecord


class Serializer(ABC):
    """Turns listing results into bytes for an output sink."""

    @abstractmethod
    def serialize(self, data: Any) -> bytes: ...

    @abstractmethod
    def deserialize(self, data: bytes) -> Any: ...


def _encode(obj: Any) -> Any:
    # records and rollups carry derived fields a plain field dump would miss
    if isinstance(obj, StatusRecord):
        return obj.to_dict()
    if isinstance(obj, ClusterRollup):
        return {
            "name": obj.name,
            "node_count": obj.node_count,
            "node_names": obj.node_names,
            "connection_total": obj.connection_total,
            "gateway_out_total": obj.gateway_out_total,
            "gateway_in_total": obj.gateway_in_total,
        }
    if isinstance(obj, AggregateSnapshot):
        return {
            "servers": obj.records,
            "totals": obj.rollup,
            "cluster_count": obj.cluster_count,
            "clusters": obj.clusters,
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, timedelta):
        return obj.total_seconds()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


class JsonSerializer(Serializer):
    """orjson encoding that understands records, rollups and snapshots."""

    def __init__(self, *, indent: bool = False) -> None:
        self.indent = indent

    def serialize(self, data: Any) -> bytes:
        option = orjson.OPT_PASSTHROUGH_DATACLASS
        if self.indent:
            option |= orjson.OPT_INDENT_2
        return orjson.dumps(data, default=_encode, option=option)

    def deserialize(self, data: bytes) -> Any:
        return orjson.loads(data)
