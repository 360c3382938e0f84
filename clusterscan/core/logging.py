"""Loguru setup shared by the listing CLI, the relay and status agents."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from loguru import logger

PACKAGE = "clusterscan"

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)


def scope_levels(level: str, debug_scopes: Iterable[str] = ()) -> dict[str, str]:
    """Build a loguru level filter: ``level`` everywhere, DEBUG inside scopes.

    A scope names a module prefix. Short scopes like ``core.collector`` also
    match inside the package, so they cover ``clusterscan.core.collector``.
    """
    levels = {"": level.upper()}
    for scope in debug_scopes:
        scope = scope.strip()
        if not scope:
            continue
        levels[scope] = "DEBUG"
        if scope != PACKAGE and not scope.startswith(f"{PACKAGE}."):
            levels[f"{PACKAGE}.{scope}"] = "DEBUG"
    return levels


def configure_logging(
    level: str,
    *,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
    sink: TextIO | None = None,
) -> int:
    """Replace loguru's handlers with one stderr handler and return its id."""
    logger.remove()
    return logger.add(
        sink or sys.stderr,
        level="DEBUG",
        format=LOG_FORMAT,
        colorize=colorize,
        filter=scope_levels(level, debug_scopes),
    )
