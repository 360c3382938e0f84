"""
clusterscan core

Status models, the thread-safe aggregator, reply collection, ranking,
display compaction and report composition.
"""

from .aggregator import AggregateSnapshot, Aggregator, ClusterRollup, GlobalRollup
from .collector import ReplyCollector
from .compact import compact_strings
from .errors import ClusterScanError, DecodeFailureError, NoResultsError
from .model import SERVER_PING_SUBJECT, ServerStatsMessage, StatusRecord
from .ranking import SortDirection, SortKey, rank, rank_by
from .report import (
    ClusterOverview,
    ServerOverview,
    compose_cluster_overview,
    compose_server_overview,
)

__all__ = [
    "AggregateSnapshot",
    "Aggregator",
    "ClusterOverview",
    "ClusterRollup",
    "ClusterScanError",
    "DecodeFailureError",
    "GlobalRollup",
    "NoResultsError",
    "ReplyCollector",
    "SERVER_PING_SUBJECT",
    "ServerOverview",
    "ServerStatsMessage",
    "SortDirection",
    "SortKey",
    "StatusRecord",
    "compact_strings",
    "compose_cluster_overview",
    "compose_server_overview",
    "rank",
    "rank_by",
]
