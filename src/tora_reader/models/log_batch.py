"""
LogBatch model representing the entries returned by one search round.
"""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterator, Optional

from ..exceptions import ToraEntryError, ToraResponseError
from ..utils import Cursor, next_cursor
from .log_entry import LogEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogBatch:
    """
    Ordered entries from one search response.

    Entry order is the backend's order and is also the delivery order.

    Attributes:
        entries: Successfully parsed entries.
        dropped: Number of hits skipped because they failed to parse.
    """

    entries: tuple[LogEntry, ...] = ()
    dropped: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def last_cursor(self) -> Optional[Cursor]:
        """Cursor of the last entry, or None for an empty batch."""
        return next_cursor(self.entries, None)

    @classmethod
    def from_hits(cls, hits: list, tz: Optional[tzinfo] = None) -> "LogBatch":
        """
        Parse a list of raw hits, dropping any hit that fails to parse.

        Args:
            hits: Contents of the response's `hits.hits` array.
            tz: Zone to convert timestamps to. Defaults to local time.

        Returns:
            LogBatch instance.
        """
        entries = []
        dropped = 0
        for position, hit in enumerate(hits):
            try:
                entries.append(LogEntry.from_hit(hit, tz))
            except ToraEntryError as e:
                dropped += 1
                logger.warning("Dropping hit %d: %s", position, e)
        if hits and dropped == len(hits):
            logger.warning(
                "All %d hits in the page failed to parse; the cursor cannot advance",
                dropped,
            )
        return cls(entries=tuple(entries), dropped=dropped)

    @classmethod
    def from_search_response(
        cls, response_data: dict, tz: Optional[tzinfo] = None
    ) -> "LogBatch":
        """
        Create LogBatch from a full search response.

        Expected format: {"hits": {"hits": [hit, ...]}}

        Args:
            response_data: Decoded JSON body of the search response.
            tz: Zone to convert timestamps to. Defaults to local time.

        Returns:
            LogBatch instance.

        Raises:
            ToraResponseError: If the envelope is missing or malformed.
        """
        if not isinstance(response_data, dict):
            raise ToraResponseError("Search response is not a JSON object")

        outer = response_data.get("hits")
        if not isinstance(outer, dict):
            raise ToraResponseError("Search response has no 'hits' object")

        hits = outer.get("hits")
        if not isinstance(hits, list):
            raise ToraResponseError("Search response has no 'hits.hits' array")

        return cls.from_hits(hits, tz)
