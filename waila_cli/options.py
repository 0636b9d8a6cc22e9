"""Run options built once from the command line."""

import os
from dataclasses import dataclass

from .units import DisplayUnit

LOG_LEVEL_ENV = "WAILA_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class OutputOptions:
    """
    How a query is classified and displayed.

    Attributes:
        show_all: Print the result even when nothing was recognized
        flatten: Emit compact single-line JSON
        unit: Display unit for amounts
        nostr: Also try to decode the query as a Nostr public key
    """

    show_all: bool = False
    flatten: bool = False
    unit: DisplayUnit = DisplayUnit.SAT
    nostr: bool = False


def log_level_from_env() -> str:
    """Log level name taken from ``WAILA_LOG_LEVEL``, defaulting to WARNING."""
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
