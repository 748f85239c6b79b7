"""
LogEntry model representing a single log record from the search index.
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Optional

from ..exceptions import ToraEntryError
from ..utils import Cursor, parse_timestamp
from .severity import Severity

SORT_SCALARS = (str, int, float, bool)


def _require_str(section: Any, key: str, where: str) -> str:
    """Fetch a string field from a hit section or fail the whole hit."""
    if not isinstance(section, dict):
        raise ToraEntryError(f"Missing '{where}' section")
    value = section.get(key)
    if value is None:
        raise ToraEntryError(f"Missing field '{where}.{key}'")
    if not isinstance(value, str):
        raise ToraEntryError(
            f"Field '{where}.{key}' must be a string, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class LogEntry:
    """
    A single parsed log record.

    Attributes:
        message: The log message content.
        timestamp: When the record was emitted, in the local time zone.
        severity: Syslog severity of the record.
        host: Host that emitted the record.
        application_name: Syslog app-name of the emitter.
        process_id: Process identifier. Currently filled from the `host`
            field, matching the behaviour of the original tool.
        cursor: Backend sort key of the hit, forwarded verbatim as
            `search_after` to fetch the next page.
    """

    message: str
    timestamp: datetime
    severity: Severity
    host: str
    application_name: str
    process_id: str
    cursor: Cursor

    @classmethod
    def from_hit(cls, hit: Any, tz: Optional[tzinfo] = None) -> "LogEntry":
        """
        Create LogEntry from one element of the response's `hits.hits` array.

        Args:
            hit: Raw hit with `_source` and `sort` keys.
            tz: Zone to convert the timestamp to. Defaults to local time.

        Returns:
            LogEntry instance.

        Raises:
            ToraEntryError: If a required field is missing or mistyped.
        """
        if not isinstance(hit, dict):
            raise ToraEntryError(f"Hit must be an object, got {type(hit).__name__}")

        source = hit.get("_source")
        message = _require_str(source, "msg", "_source")
        raw_timestamp = _require_str(source, "@timestamp", "_source")

        syslog = source.get("syslog")
        raw_severity = _require_str(syslog, "severity", "_source.syslog")
        app_name = _require_str(syslog, "app-name", "_source.syslog")
        host = _require_str(syslog, "host", "_source.syslog")
        # FIXME: process_id reads `syslog.host`; the backend field carrying
        # the real procid has not been confirmed.
        process_id = _require_str(syslog, "host", "_source.syslog")

        sort = hit.get("sort")
        if not isinstance(sort, list) or not sort:
            raise ToraEntryError("Missing or empty 'sort' array on hit")
        for value in sort:
            if value is not None and not isinstance(value, SORT_SCALARS):
                raise ToraEntryError(
                    f"'sort' values must be JSON scalars, got {type(value).__name__}"
                )

        return cls(
            message=message,
            timestamp=parse_timestamp(raw_timestamp, tz),
            severity=Severity.from_syslog(raw_severity),
            host=host,
            application_name=app_name,
            process_id=process_id,
            cursor=tuple(sort),
        )

    def to_dict(self) -> dict:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary with all fields; timestamp in ISO format.
        """
        return {
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "severity": self.severity.raw,
            "host": self.host,
            "application_name": self.application_name,
            "process_id": self.process_id,
            "cursor": list(self.cursor),
        }
