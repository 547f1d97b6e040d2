"""Domain errors raised by the graph core and the data-source adapters."""

from __future__ import annotations


class UnfoldError(Exception):
    """Base class for every error raised by unfold."""


class MissingCommunityError(UnfoldError):
    """Raised when a node without a community is queried or removed."""


class ForeignNodeError(UnfoldError, ValueError):
    """Raised when an edge references a node the graph does not own."""


class DataSourceError(UnfoldError):
    """Raised when an input adapter cannot open or parse its source."""
