"""Exception hierarchy for clusterscan."""

from __future__ import annotations

from clusterscan.datastructures.type_aliases import RawPayload


class ClusterScanError(Exception):
    """Base exception for collection and reporting failures."""

    pass


class NoResultsError(ClusterScanError):
    """Raised when the collection window closed without a single reply."""

    def __init__(
        self,
        message: str = (
            "no results received, ensure the account used has system "
            "privileges and appropriate permissions"
        ),
    ) -> None:
        super().__init__(message)


class DecodeFailureError(ClusterScanError):
    """Raised when a reply payload cannot be decoded into a status record.

    A single malformed reply aborts the whole collection run.
    """

    def __init__(self, raw: RawPayload, cause: Exception) -> None:
        self.raw = raw
        self.cause = cause
        super().__init__(f"Could not decode response: {cause}")
