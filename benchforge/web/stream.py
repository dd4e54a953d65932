import threading
from collections import deque
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class StreamClosed(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class ResultStream(Generic[T]):
    """FIFO hand-off of results from one producer to the dashboard.

    Items are kept in memory only; whatever nobody reads is lost with the
    process. Closing tells consumers that no more results will come.
    """

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._cond = threading.Condition()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def put(self, item: T) -> None:
        with self._cond:
            if self._closed:
                raise StreamClosed("put on a closed result stream")
            self._items.append(item)
            self._cond.notify()

    def get(self, timeout: float | None = None) -> T:
        """Block until an item is available and return it.

        Raises StreamClosed once the stream is closed and empty, and
        TimeoutError if `timeout` seconds pass without an item.
        """
        with self._cond:
            ready = self._cond.wait_for(lambda: self._items or self._closed, timeout)
            if self._items:
                return self._items.popleft()
            if not ready:
                raise TimeoutError(f"no result within {timeout}s")
            raise StreamClosed("result stream is closed")

    def drain(self) -> list[T]:
        with self._cond:
            items = list(self._items)
            self._items.clear()
            return items

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except StreamClosed:
                return
