"""
Custom exceptions for tora-reader.
"""


class ToraError(Exception):
    """Base exception for all tora-reader errors."""
    pass


class ToraConnectionError(ToraError):
    """Raised when the connection to the search backend fails."""
    pass


class ToraTransientError(ToraError):
    """Raised when the transport reports a would-block condition."""
    pass


class ToraQueryError(ToraError):
    """Raised when a search request returns a non-success status."""
    pass


class ToraAuthError(ToraError):
    """Raised when authentication to the search backend fails."""
    pass


class ToraResponseError(ToraError):
    """Raised when a search response does not have the expected envelope."""
    pass


class ToraEntryError(ToraError):
    """Raised when a single search hit cannot be parsed into a LogEntry."""
    pass


class ToraConfigError(ToraError):
    """Raised when the credentials file is missing or malformed."""
    pass


class DispatcherClosed(ToraError):
    """Raised when a batch is handed off after the consumer went away."""
    pass
