"""
Bounded hand-off channel between the poll loop and the consumer.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, Union

from .exceptions import DispatcherClosed
from .models import LogBatch

logger = logging.getLogger(__name__)

# How often a blocked producer or idle consumer rechecks the closed flag
CLOSE_CHECK_SECONDS = 0.1


@dataclass(frozen=True)
class Deliver:
    """A non-empty batch for the consumer."""

    batch: LogBatch


@dataclass(frozen=True)
class Stop:
    """End of stream."""


Message = Union[Deliver, Stop]


class Dispatcher:
    """
    Single-producer, single-consumer channel with room for one message.

    The producer blocks in `deliver` while the consumer still holds an
    undelivered batch, so polling never runs more than one batch ahead of
    rendering. Either side may `close()` the channel; the producer's next
    hand-off then raises DispatcherClosed.
    """

    def __init__(self, check_interval: float = CLOSE_CHECK_SECONDS):
        self.check_interval = check_interval
        self._queue: "queue.Queue[Message]" = queue.Queue(maxsize=1)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Close the channel. Pending and future hand-offs fail."""
        if not self._closed.is_set():
            logger.debug("Dispatcher closed")
        self._closed.set()

    def _put(self, message: Message) -> None:
        while True:
            if self._closed.is_set():
                raise DispatcherClosed("Consumer is no longer accepting batches")
            try:
                self._queue.put(message, timeout=self.check_interval)
                return
            except queue.Full:
                continue

    def deliver(self, batch: LogBatch) -> bool:
        """
        Hand a batch to the consumer, blocking while the channel is full.

        Empty batches are not sent.

        Args:
            batch: Batch produced by one poll round.

        Returns:
            True if the batch was empty and nothing was sent.

        Raises:
            DispatcherClosed: If the consumer has closed the channel.
        """
        if batch.is_empty:
            return True
        self._put(Deliver(batch))
        return False

    def stop(self) -> None:
        """Signal end of stream to the consumer."""
        self._put(Stop())

    def messages(self) -> Iterator[LogBatch]:
        """
        Yield delivered batches until Stop arrives or the channel closes.

        Yields:
            Each delivered LogBatch in hand-off order.
        """
        while not self._closed.is_set():
            try:
                message = self._queue.get(timeout=self.check_interval)
            except queue.Empty:
                continue
            if isinstance(message, Stop):
                return
            yield message.batch

    def consume(self, handler: Callable[[LogBatch], None]) -> None:
        """
        Drain the channel into `handler`, closing it when done.

        The channel is closed however this returns, including when the
        handler raises, so a blocked producer is released.

        Args:
            handler: Called once per delivered batch.
        """
        try:
            for batch in self.messages():
                handler(batch)
        finally:
            self.close()
