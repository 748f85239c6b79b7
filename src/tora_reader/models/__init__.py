"""
Data models for tora-reader.
"""

from .log_batch import LogBatch
from .log_entry import LogEntry
from .search_query import SearchQuery
from .severity import Severity, SeverityLevel

__all__ = [
    "LogBatch",
    "LogEntry",
    "SearchQuery",
    "Severity",
    "SeverityLevel",
]
