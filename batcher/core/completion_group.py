"""
CompletionGroup - "wait for N done signals", the counterpart of Go's sync.WaitGroup.
"""

import threading
from typing import Optional


class CompletionGroup:
    """
    Counts registered units of work and lets callers block until each of them
    has signalled done().
    """

    def __init__(self, name: str = ""):
        self.name: str = name or "group"
        self._pending: int = 0
        self._condition = threading.Condition()

    @property
    def pending(self) -> int:
        with self._condition:
            return self._pending

    def add(self, n: int = 1) -> None:
        """
        Register n more units of work.

        :param n: Number of units, must not be negative.
        :raises ValueError: If n is negative.
        """
        if n < 0:
            raise ValueError("completion group delta cannot be negative")

        with self._condition:
            self._pending += n

    def done(self) -> None:
        """
        Signal that one registered unit finished.

        :raises RuntimeError: If more units signal done than were registered.
        """
        with self._condition:
            if self._pending <= 0:
                raise RuntimeError(
                    f"completion group {self.name}: done() called more often than add()"
                )
            self._pending -= 1
            if self._pending == 0:
                self._condition.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every registered unit has signalled done().

        :param timeout: Seconds to wait. None waits indefinitely.
        :returns: True once all units are done, False if the timeout elapsed first.
        """
        with self._condition:
            return self._condition.wait_for(lambda: self._pending == 0, timeout)

    def __repr__(self) -> str:
        return f"CompletionGroup(name={self.name!r}, pending={self.pending})"
