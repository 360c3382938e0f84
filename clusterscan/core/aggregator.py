"""Thread-safe accumulation of status records into global and per-cluster rollups."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace

from loguru import logger

from clusterscan.datastructures.type_aliases import ClusterName, ServerName

from .model import StatusRecord


@dataclass(slots=True)
class ClusterRollup:
    """Running totals for one cluster, keyed by cluster name."""

    name: ClusterName
    node_names: list[ServerName] = field(default_factory=list)
    connection_total: int = 0
    gateway_out_total: int = 0
    gateway_in_total: int = 0

    @property
    def node_count(self) -> int:
        return len(self.node_names)


@dataclass(slots=True)
class GlobalRollup:
    """Running totals for the whole collection run."""

    server_count: int = 0
    connection_total: int = 0
    memory_total: int = 0
    slow_consumer_total: int = 0
    subscription_total: int = 0
    jetstream_server_count: int = 0


@dataclass(frozen=True, slots=True)
class AggregateSnapshot:
    """Read-only copy of the aggregator state taken after collection."""

    records: tuple[StatusRecord, ...]
    rollup: GlobalRollup
    clusters: tuple[ClusterRollup, ...]

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)


class Aggregator:
    """
    Accumulates status records under a single lock.

    Appending a record, updating the global rollup and updating the cluster
    rollup happen in one critical section, so no reader can observe a record
    counted in one structure but missing from another. Once sealed the
    aggregator refuses further records.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[StatusRecord] = []
        self._rollup = GlobalRollup()
        self._clusters: dict[ClusterName, ClusterRollup] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        with self._lock:
            return self._sealed

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    def on_record(self, record: StatusRecord, *, limit: int = 0) -> bool:
        """Fold one record into the rollups.

        Returns False when the aggregator is already sealed. When ``limit`` is
        positive the aggregator seals itself as soon as that many records
        have been accepted.
        """
        with self._lock:
            if self._sealed:
                logger.debug(
                    "Discarding late status from {} after window closed",
                    record.server_name,
                )
                return False

            self._records.append(record)

            rollup = self._rollup
            rollup.server_count += 1
            rollup.connection_total += record.connections
            rollup.memory_total += record.memory_bytes
            rollup.slow_consumer_total += record.slow_consumer_count
            rollup.subscription_total += record.subscriptions
            if record.jetstream_enabled:
                rollup.jetstream_server_count += 1

            if record.cluster_name:
                cluster = self._clusters.get(record.cluster_name)
                if cluster is None:
                    cluster = ClusterRollup(name=record.cluster_name)
                    self._clusters[record.cluster_name] = cluster
                cluster.node_names.append(record.server_name)
                cluster.connection_total += record.connections
                cluster.gateway_out_total += record.gateway_count
                cluster.gateway_in_total += record.gateway_inbound_total

            if limit > 0 and rollup.server_count >= limit:
                self._sealed = True

            return True

    def snapshot(self) -> AggregateSnapshot:
        with self._lock:
            return AggregateSnapshot(
                records=tuple(self._records),
                rollup=replace(self._rollup),
                clusters=tuple(
                    replace(cluster, node_names=list(cluster.node_names))
                    for cluster in self._clusters.values()
                ),
            )
