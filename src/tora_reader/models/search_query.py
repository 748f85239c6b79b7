"""
SearchQuery model representing a paginated search request body.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Optional

from ..utils import Cursor

MATCH_ALL = "*:*"
DEFAULT_PAGE_SIZE = 500


def default_sort() -> list[dict[str, str]]:
    """Timestamp ascending, then document id as the tiebreak."""
    return [{"@timestamp": "asc"}, {"_id": "asc"}]


@dataclass(frozen=True)
class SearchQuery:
    """
    A query_string search with fixed sort and an optional cursor.

    Attributes:
        query: Free-text query; empty means match everything.
        size: Page size.
        sort: Ordered list of {field: direction} pairs.
        cursor: Sort key of the last record already seen. When set, only
            records strictly after it are returned.
    """

    query: str
    size: int = DEFAULT_PAGE_SIZE
    sort: list[dict[str, str]] = field(default_factory=default_sort)
    cursor: Optional[Cursor] = None

    def with_cursor(self, cursor: Optional[Cursor]) -> "SearchQuery":
        """Return a copy of this query positioned after `cursor`."""
        return replace(self, cursor=cursor)

    def to_dict(self) -> dict:
        """
        Convert to the request body dictionary.

        Returns:
            Dictionary with query, size, sort and, only when a cursor is
            set, search_after.
        """
        body = {
            "query": {"query_string": {"query": self.query or MATCH_ALL}},
            "size": self.size,
            "sort": [dict(pair) for pair in self.sort],
        }
        if self.cursor is not None:
            body["search_after"] = list(self.cursor)
        return body

    def to_json(self) -> str:
        """Serialize the request body as compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
