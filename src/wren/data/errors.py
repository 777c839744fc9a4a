"""Data layer error hierarchy."""

from wren.errors import WrenError


class DataError(WrenError):
    """Base for all wren.data errors."""


class QueryError(DataError):
    """Raised when a SQL query fails."""
