"""Synchronisation between kernel threads: semaphores, locks and condition variables.

Only one kernel thread executes at a time, so each operation is atomic with
respect to the others without further protection.  Locks are built on a
semaphore, and condition variables give every waiter its own semaphore, with
Mesa-style semantics: a woken waiter must reacquire the lock itself.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Optional

from nachos.thread import Thread

__all__ = ["Semaphore", "Lock", "Condition"]


class Semaphore:
    """A counting semaphore whose value never goes below zero."""

    def __init__(self, name: str, initial_value: int, kernel: Any) -> None:
        if initial_value < 0:
            raise ValueError("a semaphore's initial value must not be negative")
        self.name = name
        self.kernel = kernel
        self._value = initial_value
        self._queue: Deque[Thread] = deque()

    def __repr__(self) -> str:
        return f"Semaphore({self.name!r}, waiting={len(self._queue)})"

    def p(self) -> None:
        """Wait until the value is positive, then decrement it."""
        while self._value == 0:
            current = self.kernel.current_thread
            self._queue.append(current)
            current.sleep(False)
        self._value -= 1

    def v(self) -> None:
        """Increment the value, waking one waiting thread if there is one."""
        if self._queue:
            self.kernel.scheduler.ready_to_run(self._queue.popleft())
        self._value += 1


class Lock:
    """A mutual-exclusion lock that only its holder may release."""

    def __init__(self, name: str, kernel: Any) -> None:
        self.name = name
        self.kernel = kernel
        self._semaphore = Semaphore("lock", 1, kernel)
        self._holder: Optional[Thread] = None

    def __repr__(self) -> str:
        holder = self._holder.name if self._holder is not None else None
        return f"Lock({self.name!r}, holder={holder!r})"

    def acquire(self) -> None:
        """Wait until the lock is free, then take it."""
        self._semaphore.p()
        self._holder = self.kernel.current_thread

    def release(self) -> None:
        """Free the lock, waking a thread waiting for it if there is one."""
        if not self.is_held_by_current_thread():
            raise RuntimeError(f"lock {self.name!r} is not held by the running thread")
        self._holder = None
        self._semaphore.v()

    def is_held_by_current_thread(self) -> bool:
        """Return True if the running thread holds the lock."""
        return self._holder is not None and self._holder is self.kernel.current_thread

    def __enter__(self) -> "Lock":
        self.acquire()
        return self

    def __exit__(self, *args: Any) -> None:
        self.release()


class Condition:
    """A condition variable with Mesa-style semantics."""

    def __init__(self, name: str, kernel: Any) -> None:
        self.name = name
        self.kernel = kernel
        self._waiters: Deque[Semaphore] = deque()

    def __len__(self) -> int:
        return len(self._waiters)

    def _require_held(self, lock: Lock) -> None:
        if not lock.is_held_by_current_thread():
            raise RuntimeError(
                f"condition {self.name!r} used without holding lock {lock.name!r}"
            )

    def wait(self, lock: Lock) -> None:
        """Release ``lock``, sleep until signalled, then reacquire ``lock``."""
        self._require_held(lock)
        waiter = Semaphore("condition", 0, self.kernel)
        self._waiters.append(waiter)
        lock.release()
        waiter.p()
        lock.acquire()

    def signal(self, lock: Lock) -> None:
        """Wake one waiting thread, if any."""
        self._require_held(lock)
        if self._waiters:
            self._waiters.popleft().v()

    def broadcast(self, lock: Lock) -> None:
        """Wake every waiting thread."""
        while self._waiters:
            self.signal(lock)