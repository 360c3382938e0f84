"""clusterscan: scatter-gather status listing for server clusters."""

__version__ = "0.1.0"
