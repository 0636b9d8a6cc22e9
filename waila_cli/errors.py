"""Exceptions raised by waila-cli."""


class WailaError(Exception):
    """Base class for all waila-cli errors."""


class UsageError(WailaError):
    """Command-line arguments could not be turned into a query and options."""


class InternalError(WailaError):
    """The classifier failed unexpectedly while inspecting a query."""
