"""Tests for the Dispatcher hand-off channel."""

import threading
from datetime import datetime, timezone

import pytest

from tora_reader.dispatcher import Deliver, Dispatcher, Stop
from tora_reader.exceptions import DispatcherClosed
from tora_reader.models import LogBatch, LogEntry, Severity


JOIN_TIMEOUT = 5.0


def make_batch(*messages: str) -> LogBatch:
    entries = tuple(
        LogEntry(
            message=message,
            timestamp=datetime(2019, 1, 26, tzinfo=timezone.utc),
            severity=Severity.from_syslog("info"),
            host="web-1",
            application_name="billing",
            process_id="web-1",
            cursor=(position, message),
        )
        for position, message in enumerate(messages)
    )
    return LogBatch(entries=entries)


def start(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class TestMessages:
    """Test message types."""

    def test_deliver_carries_batch(self) -> None:
        batch = make_batch("a")
        assert Deliver(batch).batch is batch

    def test_stop_equality(self) -> None:
        assert Stop() == Stop()


class TestDispatcherDeliver:
    """Test the producer side."""

    def test_empty_batch_not_sent(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        assert dispatcher.deliver(LogBatch()) is True
        # Queue still has room, so a real batch goes straight through
        assert dispatcher.deliver(make_batch("a")) is False

    def test_batches_arrive_in_order(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        first, second, third = make_batch("a"), make_batch("b", "c"), make_batch("d")

        def produce() -> None:
            for batch in (first, LogBatch(), second, third):
                dispatcher.deliver(batch)
            dispatcher.stop()

        producer = start(produce)
        received = list(dispatcher.messages())
        producer.join(JOIN_TIMEOUT)

        assert received == [first, second, third]

    def test_producer_blocks_until_consumer_takes(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        dispatcher.deliver(make_batch("a"))

        producer = start(dispatcher.deliver, make_batch("b"))
        producer.join(0.2)
        assert producer.is_alive()

        messages = dispatcher.messages()
        assert [e.message for e in next(messages)] == ["a"]
        producer.join(JOIN_TIMEOUT)
        assert not producer.is_alive()
        assert [e.message for e in next(messages)] == ["b"]

    def test_deliver_after_close_fails(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        dispatcher.close()
        with pytest.raises(DispatcherClosed):
            dispatcher.deliver(make_batch("a"))

    def test_empty_deliver_after_close_is_noop(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        dispatcher.close()
        assert dispatcher.deliver(LogBatch()) is True

    def test_close_releases_blocked_producer(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        dispatcher.deliver(make_batch("a"))
        errors: list[Exception] = []

        def produce() -> None:
            try:
                dispatcher.deliver(make_batch("b"))
            except DispatcherClosed as e:
                errors.append(e)

        producer = start(produce)
        dispatcher.close()
        producer.join(JOIN_TIMEOUT)

        assert not producer.is_alive()
        assert len(errors) == 1


class TestDispatcherConsume:
    """Test the consumer side."""

    def test_consume_calls_handler_then_closes(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        seen: list[LogBatch] = []
        batch = make_batch("a", "b")

        def produce() -> None:
            dispatcher.deliver(batch)
            dispatcher.stop()

        producer = start(produce)
        dispatcher.consume(seen.append)
        producer.join(JOIN_TIMEOUT)

        assert seen == [batch]
        assert dispatcher.closed

    def test_handler_error_closes_channel(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        dispatcher.deliver(make_batch("a"))

        def explode(batch: LogBatch) -> None:
            raise BrokenPipeError()

        with pytest.raises(BrokenPipeError):
            dispatcher.consume(explode)

        assert dispatcher.closed
        with pytest.raises(DispatcherClosed):
            dispatcher.deliver(make_batch("b"))

    def test_messages_end_when_closed(self) -> None:
        dispatcher = Dispatcher(check_interval=0.01)
        consumer_done = threading.Event()

        def drain() -> None:
            list(dispatcher.messages())
            consumer_done.set()

        start(drain)
        dispatcher.close()
        assert consumer_done.wait(JOIN_TIMEOUT)
