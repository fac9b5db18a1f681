"""
Domain-specific exception hierarchy for the tableslots application.
"""


class TableslotsError(Exception):
    """Base class for all application-level errors."""


class InvalidArgumentError(TableslotsError, ValueError):
    """Raised when an availability query or a domain record is malformed."""


class DataSourceError(TableslotsError):
    """Raised when restaurant data cannot be fetched or parsed."""
