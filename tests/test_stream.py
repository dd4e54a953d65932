# tests/test_stream.py
from __future__ import annotations

import threading

import pytest

from benchforge.web.stream import ResultStream, StreamClosed


def test_items_come_out_in_order() -> None:
    stream: ResultStream[int] = ResultStream()
    for i in range(5):
        stream.put(i)

    assert [stream.get() for _ in range(5)] == [0, 1, 2, 3, 4]


def test_drain_returns_queued_items_and_empties() -> None:
    stream: ResultStream[str] = ResultStream()
    stream.put("a")
    stream.put("b")

    assert stream.drain() == ["a", "b"]
    assert stream.drain() == []


def test_get_times_out_when_empty() -> None:
    stream: ResultStream[int] = ResultStream()
    with pytest.raises(TimeoutError):
        stream.get(timeout=0.01)


def test_close_lets_consumers_finish_remaining_items() -> None:
    stream: ResultStream[int] = ResultStream()
    stream.put(1)
    stream.put(2)
    stream.close()

    assert stream.closed
    assert list(stream) == [1, 2]
    with pytest.raises(StreamClosed):
        stream.get()


def test_put_after_close_raises() -> None:
    stream: ResultStream[int] = ResultStream()
    stream.close()
    with pytest.raises(StreamClosed):
        stream.put(1)


def test_consumer_thread_sees_producer_order() -> None:
    stream: ResultStream[int] = ResultStream()
    received: list[int] = []

    consumer = threading.Thread(target=lambda: received.extend(stream))
    consumer.start()

    for i in range(100):
        stream.put(i)
    stream.close()
    consumer.join(timeout=5)

    assert not consumer.is_alive()
    assert received == list(range(100))


def test_close_wakes_blocked_consumers() -> None:
    stream: ResultStream[int] = ResultStream()
    outcomes: list[str] = []

    def consume() -> None:
        try:
            stream.get()
        except StreamClosed:
            outcomes.append("closed")

    consumers = [threading.Thread(target=consume) for _ in range(3)]
    for t in consumers:
        t.start()
    stream.close()
    for t in consumers:
        t.join(timeout=5)

    assert outcomes == ["closed"] * 3
