"""The ready list of kernel threads and the dispatcher that switches between them.

The policy is plain first-in, first-out with no priorities.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Optional

from nachos.thread import Thread, ThreadStatus

__all__ = ["Scheduler"]


class Scheduler:
    """Keeps the threads that are ready to run and dispatches the processor."""

    def __init__(self, kernel: Any) -> None:
        self.kernel = kernel
        self._ready: Deque[Thread] = deque()
        self.to_be_destroyed: Optional[Thread] = None

    def __len__(self) -> int:
        return len(self._ready)

    @property
    def ready_threads(self) -> tuple[Thread, ...]:
        """The threads on the ready list, front first."""
        return tuple(self._ready)

    def ready_to_run(self, thread: Thread) -> None:
        """Mark ``thread`` ready and put it at the back of the ready list."""
        thread.status = ThreadStatus.READY
        self._ready.append(thread)

    def find_next_to_run(self) -> Optional[Thread]:
        """Remove and return the front thread of the ready list, or None if empty."""
        return self._ready.popleft() if self._ready else None

    def run(self, next_thread: Thread, finishing: bool) -> None:
        """Dispatch the processor to ``next_thread``.

        The running thread must already have been marked ready or blocked.
        If ``finishing`` is true, the running thread is destroyed once the
        next thread is running.  Returns when the old thread runs again.
        """
        old_thread = self.kernel.current_thread
        if finishing:
            if self.to_be_destroyed is not None:
                raise RuntimeError(
                    f"thread {self.to_be_destroyed.name!r} is still waiting to be destroyed"
                )
            self.to_be_destroyed = old_thread

        self.kernel.current_thread = next_thread
        next_thread.status = ThreadStatus.RUNNING
        old_thread._switch_to(next_thread)

        # Running the old thread again.
        self.check_to_be_destroyed()

    def check_to_be_destroyed(self) -> Optional[Thread]:
        """Dispose of a thread that finished before the current one started.

        Returns the disposed thread, or None if there was none.
        """
        finished, self.to_be_destroyed = self.to_be_destroyed, None
        return finished

    def describe(self) -> str:
        """Describe the contents of the ready list."""
        names = " ".join(thread.name for thread in self._ready)
        return f"Ready list contents:\n{names}"