"""
SearchClient for fetching log pages from an Elasticsearch-compatible index.
"""

import logging
from datetime import tzinfo
from typing import Optional

import requests

from .exceptions import (
    ToraAuthError,
    ToraConnectionError,
    ToraQueryError,
    ToraResponseError,
    ToraTransientError,
)
from .models import LogBatch, SearchQuery
from .utils import DEFAULT_INDEX_PREFIX, index_pattern

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://localhost:9200"


def _is_would_block(error: BaseException) -> bool:
    """Check whether a would-block I/O error sits anywhere in the chain.

    requests wraps urllib3 errors which in turn wrap socket errors, either
    as the explicit cause, the implicit context, or as a positional arg.

    Args:
        error: Exception raised by the transport.

    Returns:
        True if a BlockingIOError was found.
    """
    seen: set[int] = set()
    pending: list[BaseException] = [error]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, BlockingIOError):
            return True
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
        for arg in current.args:
            if isinstance(arg, BaseException):
                pending.append(arg)
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            pending.append(reason)
    return False


class SearchClient:
    """
    Client for paging through a log index with search_after cursors.

    Example:
        client = SearchClient(
            base_url="https://search.example.com:9200",
            auth=("user", "pass"),
        )

        batch = client.search(SearchQuery(query="lukla"), index="payments")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        auth: Optional[tuple[str, str]] = None,
        index_prefix: str = DEFAULT_INDEX_PREFIX,
        verify_ssl: bool = True,
        timeout: int = 30,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the search client.

        Args:
            base_url: Base URL of the search backend.
            auth: Optional tuple of (username, password) for basic authentication.
            index_prefix: Prefix of the log indices (e.g., "logstash").
            verify_ssl: Whether to verify SSL certificates.
            timeout: Request timeout in seconds.
            tz: Zone entry timestamps are converted to. Defaults to local time.
        """
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.index_prefix = index_prefix
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.tz = tz

        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """
        Get or create HTTP session with configured authentication and SSL settings.

        Returns:
            Configured requests.Session instance.
        """
        if self._session is None:
            self._session = requests.Session()

            if self.auth:
                self._session.auth = self.auth

            self._session.headers["Content-Type"] = "application/json"
            self._session.verify = self.verify_ssl

        return self._session

    def search_url(self, index: str) -> str:
        """Build the _search URL for a logical index name."""
        return f"{self.base_url}/{index_pattern(index, self.index_prefix)}/_search"

    def _request(self, url: str, body: str) -> dict:
        """
        Send one GET-with-body search request.

        Args:
            url: Full _search URL.
            body: Serialized request body.

        Returns:
            JSON response as dictionary.

        Raises:
            ToraTransientError: If the transport reported a would-block condition.
            ToraConnectionError: If the connection fails for any other reason.
            ToraAuthError: If authentication fails (401/403).
            ToraQueryError: If the backend returns any other non-2xx status.
            ToraResponseError: If the body is not valid JSON.
        """
        try:
            response = self.session.request(
                method="GET",
                url=url,
                data=body.encode("utf-8"),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            if _is_would_block(e):
                raise ToraTransientError(f"Search request would block: {e}") from e
            if isinstance(e, requests.exceptions.SSLError):
                raise ToraConnectionError(f"SSL error connecting to backend: {e}") from e
            if isinstance(e, requests.exceptions.ConnectionError):
                raise ToraConnectionError(f"Failed to connect to {url}: {e}") from e
            if isinstance(e, requests.exceptions.Timeout):
                raise ToraConnectionError(f"Search request timed out: {e}") from e
            raise ToraConnectionError(f"Search request failed: {e}") from e

        if response.status_code == 401:
            raise ToraAuthError("Authentication failed: invalid credentials")
        if response.status_code == 403:
            raise ToraAuthError("Authorization failed: access denied")

        if not 200 <= response.status_code < 300:
            raise ToraQueryError(
                f"Search failed with status {response.status_code}: {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ToraResponseError(f"Invalid JSON response from backend: {e}") from e

    def search(self, query: SearchQuery, index: str) -> LogBatch:
        """
        Fetch one page of log entries.

        A would-block transport condition yields an empty batch so the
        caller backs off and retries on its next round.

        Args:
            query: Search request, including the cursor to resume after.
            index: Logical index name.

        Returns:
            LogBatch with the entries of the page, possibly empty.

        Raises:
            ToraConnectionError: On any non-transient transport failure.
            ToraAuthError: If authentication fails.
            ToraQueryError: If the backend rejects the request.
            ToraResponseError: If the response envelope is malformed.
        """
        url = self.search_url(index)
        try:
            response = self._request(url, query.to_json())
        except ToraTransientError as e:
            logger.warning("%s; treating as an empty page", e)
            return LogBatch()

        batch = LogBatch.from_search_response(response, self.tz)
        logger.debug(
            "Fetched %d entries from %s (%d dropped)", len(batch), url, batch.dropped
        )
        return batch

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "SearchClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes session."""
        self.close()
