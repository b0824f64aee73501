"""A list whose accesses are synchronised between kernel threads.

Every operation holds the list's lock for its whole duration.  Removing from
an empty list waits on a condition variable until something is appended.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Generic, TypeVar

from nachos.synch import Condition, Lock

__all__ = ["SynchList"]

T = TypeVar("T")


class SynchList(Generic[T]):
    """A FIFO list that one kernel thread at a time may use.

    A thread removing an item waits until the list holds one.
    """

    def __init__(self, kernel: Any) -> None:
        self.kernel = kernel
        self._items: Deque[T] = deque()
        self._lock = Lock("list lock", kernel)
        self._list_empty = Condition("list empty cond", kernel)

    def __len__(self) -> int:
        return len(self._items)

    def append(self, item: T) -> None:
        """Add ``item`` at the end and wake a thread waiting to remove, if any."""
        with self._lock:
            self._items.append(item)
            self._list_empty.signal(self._lock)

    def remove_front(self) -> T:
        """Remove and return the first item, waiting while the list is empty."""
        with self._lock:
            while not self._items:
                self._list_empty.wait(self._lock)
            return self._items.popleft()

    def apply(self, func: Callable[[T], Any]) -> None:
        """Call ``func`` on every item, front first."""
        with self._lock:
            for item in self._items:
                func(item)