"""
Poll loop that pages through the index and feeds the dispatcher.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .client import SearchClient
from .dispatcher import Dispatcher
from .exceptions import DispatcherClosed
from .models import LogBatch, SearchQuery
from .utils import Cursor, next_cursor

logger = logging.getLogger(__name__)

IDLE_INTERVAL_SECONDS = 2.0


@dataclass(frozen=True)
class PollState:
    """
    State carried from one poll round to the next.

    Each round produces a new PollState; instances are never mutated.

    Attributes:
        index: Logical index name being followed.
        query: Query template; its cursor is the position of the next page.
        cursor: Cursor taken from the last page fetched, not yet embedded
            in `query`.
    """

    index: str
    query: SearchQuery
    cursor: Optional[Cursor] = None


class Poller:
    """
    Adaptive polling loop.

    Each round fetches a page, hands any entries to the dispatcher and
    advances the cursor. A non-empty page is followed immediately by the
    next request; an empty one by a fixed idle delay.
    """

    def __init__(
        self,
        client: SearchClient,
        dispatcher: Dispatcher,
        idle_interval: float = IDLE_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the poller.

        Args:
            client: Transport used for every search request.
            dispatcher: Channel to the consumer.
            idle_interval: Seconds to wait after an empty page.
            sleep: Sleep function, replaceable in tests.
        """
        self.client = client
        self.dispatcher = dispatcher
        self.idle_interval = idle_interval
        self._sleep = sleep

    def send(self, state: PollState) -> tuple[PollState, LogBatch]:
        """
        Run the search for the current query and track the new cursor.

        Transport and envelope errors other than would-block propagate.
        """
        batch = self.client.search(state.query, state.index)
        cursor = next_cursor(batch.entries, state.query.cursor)
        return replace(state, cursor=cursor), batch

    def process(self, state: PollState, batch: LogBatch) -> tuple[PollState, bool]:
        """
        Hand the batch to the dispatcher and move the cursor into the query.

        Blocks while the consumer is still busy with the previous batch.

        Returns:
            The next state and whether the batch was empty.

        Raises:
            DispatcherClosed: If the consumer has gone away.
        """
        is_empty = self.dispatcher.deliver(batch)
        query = state.query.with_cursor(state.cursor)
        return replace(state, query=query, cursor=None), is_empty

    def delay_for(self, is_empty: bool) -> float:
        """Seconds to wait before the next request."""
        return self.idle_interval if is_empty else 0.0

    def step(self, state: PollState) -> PollState:
        """Run one full round: query, dispatch, pace."""
        state, batch = self.send(state)
        state, is_empty = self.process(state, batch)
        delay = self.delay_for(is_empty)
        logger.debug(
            "Round done: %d entries, cursor=%s, next poll in %.1fs",
            len(batch), state.query.cursor, delay,
        )
        if delay:
            self._sleep(delay)
        return state

    def run(self, state: PollState, max_rounds: Optional[int] = None) -> PollState:
        """
        Poll until the consumer closes the dispatcher.

        Any fatal search error propagates to the caller unchanged.

        Args:
            state: Initial state, normally with no cursor.
            max_rounds: Stop after this many rounds. None polls forever.

        Returns:
            The last state reached.
        """
        rounds = 0
        while max_rounds is None or rounds < max_rounds:
            if self.dispatcher.closed:
                logger.info("Consumer closed, stopping poll loop")
                break
            try:
                state = self.step(state)
            except DispatcherClosed:
                logger.info("Consumer closed, stopping poll loop")
                break
            rounds += 1
        return state
