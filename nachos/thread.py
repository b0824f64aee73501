"""Kernel threads: creation, forking, yielding, sleeping and finishing.

Every kernel thread runs on its own host thread, but only one of them is ever
allowed to execute at a time.  Each thread owns a baton; a context switch
hands the baton to the next thread and then waits until the baton comes back.
A finishing thread hands its baton on and then unwinds and exits.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Optional

__all__ = ["STACK_SIZE", "ThreadStatus", "Thread"]

STACK_SIZE = 8 * 1024


class ThreadStatus(Enum):
    """Life-cycle states of a kernel thread."""

    JUST_CREATED = "just created"
    RUNNING = "running"
    READY = "ready"
    BLOCKED = "blocked"


class _ThreadExit(BaseException):
    """Unwinds the host thread of a kernel thread that has finished."""


class Thread:
    """A kernel thread control block."""

    def __init__(self, name: str, kernel: Any) -> None:
        self.name = name
        self.kernel = kernel
        self.status = ThreadStatus.JUST_CREATED
        self.space: Any = None
        self.error: Optional[BaseException] = None
        self._baton = threading.Semaphore(0)
        self._runner: Optional[threading.Thread] = None
        self._finishing = False

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Thread({self.name!r}, status={self.status.name})"

    def _require_current(self, action: str) -> None:
        if self.kernel.current_thread is not self:
            raise RuntimeError(f"cannot {action} thread {self.name!r}: it is not running")

    def fork(self, func: Callable[[Any], Any], arg: Any) -> None:
        """Arrange for ``func(arg)`` to run in this thread and make it ready."""
        if self._runner is not None:
            raise RuntimeError(f"thread {self.name!r} has already been forked")
        self._runner = threading.Thread(
            target=self._bootstrap, args=(func, arg), name=self.name, daemon=True
        )
        self._runner.start()
        self.kernel.scheduler.ready_to_run(self)

    def _bootstrap(self, func: Callable[[Any], Any], arg: Any) -> None:
        self._baton.acquire()
        try:
            self.begin()
            func(arg)
        except _ThreadExit:
            return
        except BaseException as exc:  # recorded so the thread can still finish
            self.error = exc
        try:
            self.finish()
        except _ThreadExit:
            pass

    def _switch_to(self, next_thread: "Thread") -> None:
        """Hand the processor from this thread to ``next_thread``.

        Returns when this thread is switched back in; a finishing thread
        never returns.
        """
        next_thread._baton.release()
        if self._finishing:
            raise _ThreadExit
        self._baton.acquire()

    def begin(self) -> None:
        """Start-up work done by a freshly forked thread before its procedure."""
        self._require_current("begin")
        self.kernel.scheduler.check_to_be_destroyed()

    def finish(self) -> None:
        """Give up the processor for good; the thread is destroyed afterwards."""
        self._require_current("finish")
        self._finishing = True
        self.sleep(True)

    def yield_cpu(self) -> None:
        """Let another ready thread run, if there is one."""
        self._require_current("yield")
        scheduler = self.kernel.scheduler
        next_thread = scheduler.find_next_to_run()
        if next_thread is not None:
            scheduler.ready_to_run(self)
            scheduler.run(next_thread, False)

    def sleep(self, finishing: bool) -> None:
        """Block this thread and run the next ready one, idling until one exists."""
        self._require_current("sleep")
        self.status = ThreadStatus.BLOCKED
        scheduler = self.kernel.scheduler
        while (next_thread := scheduler.find_next_to_run()) is None:
            self.kernel.idle()
        scheduler.run(next_thread, finishing)