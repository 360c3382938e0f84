"""
clusterscan command line interface.

Server listing, relay and agent commands.
"""

from .main import cli, main
from .server_list import ListingOptions, ServerListCLI

__all__ = ["ListingOptions", "ServerListCLI", "cli", "main"]
