"""
Python library for following log indices with search_after pagination
"""

from .client import SearchClient
from .dispatcher import Deliver, Dispatcher, Stop
from .exceptions import (
    DispatcherClosed,
    ToraAuthError,
    ToraConfigError,
    ToraConnectionError,
    ToraEntryError,
    ToraError,
    ToraQueryError,
    ToraResponseError,
    ToraTransientError,
)
from .models import LogBatch, LogEntry, SearchQuery, Severity, SeverityLevel
from .poller import PollState, Poller

__version__ = "0.1.0"

__all__ = [
    "SearchClient",
    "Dispatcher",
    "Deliver",
    "Stop",
    "Poller",
    "PollState",
    "LogBatch",
    "LogEntry",
    "SearchQuery",
    "Severity",
    "SeverityLevel",
    "ToraError",
    "ToraConnectionError",
    "ToraTransientError",
    "ToraQueryError",
    "ToraAuthError",
    "ToraResponseError",
    "ToraEntryError",
    "ToraConfigError",
    "DispatcherClosed",
]
