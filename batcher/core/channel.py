"""
Threadsafe Channel - bounded, closable queue shared between producers and consumers.

Used for both the job source (dispatcher -> workers) and the result sink
(workers -> collector).
"""

import threading
import time
from collections import deque
from typing import Deque, Generic, Iterator, Optional, TypeVar, Union

from ..helper.error import ClosedQueueError, InvalidConfigurationError
from ..helper.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class _EndOfStream:
    """Marker returned by take() once a closed channel is drained."""

    _instance: Optional["_EndOfStream"] = None

    def __new__(cls) -> "_EndOfStream":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END_OF_STREAM"

    def __bool__(self) -> bool:
        return False


END_OF_STREAM = _EndOfStream()


class Channel(Generic[T]):
    """
    A bounded multi-producer, multi-consumer queue with a one-time close.

    put() blocks while the channel is full and raises ClosedQueueError once
    the channel is closed. take() blocks while the channel is empty and open,
    and returns END_OF_STREAM once the channel is closed and drained.
    """

    def __init__(self, capacity: int, name: str = ""):
        """
        Initialize the channel.

        :param capacity: Maximum number of buffered items, at least 1.
        :param name: Name used in log messages.
        :raises InvalidConfigurationError: If capacity is smaller than 1.
        """
        if not isinstance(capacity, int) or capacity < 1:
            raise InvalidConfigurationError(
                f"channel capacity must be at least 1, got {capacity!r}"
            )

        self.capacity: int = capacity
        self.name: str = name or "channel"
        self._items: Deque[T] = deque()
        self._closed: bool = False
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

        self.put_count: int = 0
        self.take_count: int = 0

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def qsize(self) -> int:
        """Return the number of buffered items."""
        with self._lock:
            return len(self._items)

    def put(self, item: T, timeout: Optional[float] = None) -> None:
        """
        Put an item into the channel, blocking while it is full.

        :param item: The item to enqueue.
        :param timeout: Seconds to wait for free space. None waits indefinitely.
        :raises ClosedQueueError: If the channel is or becomes closed.
        :raises TimeoutError: If no space frees up within the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._not_full:
            while True:
                if self._closed:
                    raise ClosedQueueError(f"put on closed channel {self.name}")
                if len(self._items) < self.capacity:
                    break
                if not self._wait(self._not_full, deadline):
                    raise TimeoutError(
                        f"channel {self.name} still full after {timeout} seconds"
                    )

            self._items.append(item)
            self.put_count += 1
            self._not_empty.notify()

    def take(self, timeout: Optional[float] = None) -> Union[T, _EndOfStream]:
        """
        Take the next item, blocking while the channel is empty and open.

        :param timeout: Seconds to wait for an item. None waits indefinitely.
        :returns: The next item, or END_OF_STREAM once closed and drained.
        :raises TimeoutError: If nothing arrives within the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._not_empty:
            while not self._items:
                if self._closed:
                    return END_OF_STREAM
                if not self._wait(self._not_empty, deadline):
                    raise TimeoutError(
                        f"channel {self.name} still empty after {timeout} seconds"
                    )

            item = self._items.popleft()
            self.take_count += 1
            self._not_full.notify()
            return item

    def close(self) -> None:
        """
        Close the channel. Buffered items stay available to consumers.
        Closing more than once has no further effect.
        """
        with self._lock:
            if self._closed:
                logger.debug(f"Channel {self.name} already closed")
                return

            self._closed = True
            # Wake every waiter: consumers see end-of-stream once drained,
            # blocked producers see the closed channel.
            self._not_empty.notify_all()
            self._not_full.notify_all()

        logger.debug(
            f"Channel {self.name} closed",
            buffered=self.qsize(),
            put_count=self.put_count,
        )

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self.take()
            if item is END_OF_STREAM:
                return
            yield item  # type: ignore[misc]

    def __repr__(self) -> str:
        return (
            f"Channel(name={self.name!r}, capacity={self.capacity}, "
            f"size={self.qsize()}, closed={self.closed})"
        )

    @staticmethod
    def _wait(condition: threading.Condition, deadline: Optional[float]) -> bool:
        if deadline is None:
            condition.wait()
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        condition.wait(remaining)
        return True
