"""
Timestamp and cursor helpers for working with search hits.
"""

import re
from datetime import datetime, tzinfo
from typing import Any, Optional, Sequence

from .exceptions import ToraEntryError


Cursor = tuple[Any, ...]

DEFAULT_INDEX_PREFIX = "logstash"

RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


def parse_timestamp(raw: str, tz: Optional[tzinfo] = None) -> datetime:
    """
    Parse an RFC3339 timestamp and convert it to the local time zone.

    Args:
        raw: Timestamp string such as "2019-01-26T00:00:00.074Z".
        tz: Target zone. Defaults to the system local zone.

    Returns:
        Timezone-aware datetime in the target zone.

    Raises:
        ToraEntryError: If the string is not a valid RFC3339 timestamp.
    """
    if not isinstance(raw, str) or not RFC3339_PATTERN.fullmatch(raw):
        raise ToraEntryError(f"Invalid RFC3339 timestamp {raw!r}")

    # fromisoformat only takes the upper-case designators
    normalized = raw[:10] + "T" + raw[11:]
    if normalized[-1] == "z":
        normalized = normalized[:-1] + "Z"

    try:
        parsed = datetime.fromisoformat(normalized)
    except (TypeError, ValueError) as e:
        raise ToraEntryError(f"Invalid RFC3339 timestamp {raw!r}: {e}") from e

    return parsed.astimezone(tz)


def next_cursor(entries: Sequence, previous: Optional[Cursor]) -> Optional[Cursor]:
    """
    Pick the cursor for the next page.

    The cursor of the last entry wins, in the order the backend returned
    them. An empty page leaves the previous cursor untouched.

    Args:
        entries: Parsed entries of the page just fetched.
        previous: Cursor used to fetch that page, or None.

    Returns:
        Cursor to embed in the next query.
    """
    if not entries:
        return previous
    return entries[-1].cursor


def index_pattern(index: str, prefix: str = DEFAULT_INDEX_PREFIX) -> str:
    """
    Build the wildcard index pattern for a logical index name.

    Args:
        index: Logical index name (e.g., "payments").
        prefix: Index prefix shared by all log indices.

    Returns:
        Index pattern such as "logstash-payments-*".
    """
    return f"{prefix}-{index}-*"
