"""Synchronised access to the console keyboard and display.

A request is completed by a console interrupt: the device posts a callback on
the kernel's pending interrupts, and the requesting thread waits on a
semaphore that the callback releases.  A lock lets only one reader and one
writer use the console at a time.
"""

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from nachos.synch import Lock, Semaphore

__all__ = ["SynchConsoleInput", "SynchConsoleOutput"]


class SynchConsoleInput:
    """Reads characters from the console one at a time."""

    def __init__(self, kernel: Any, stream: Optional[TextIO] = None) -> None:
        self.kernel = kernel
        self._stream = stream if stream is not None else sys.stdin
        self._lock = Lock("console in", kernel)
        self._wait_for = Semaphore("console in", 0, kernel)

    def _call_back(self) -> None:
        self._wait_for.v()

    def get_char(self) -> str:
        """Return the next character, waiting for it; return "" at end of input."""
        with self._lock:
            self.kernel.pending_interrupts.append(self._call_back)
            self._wait_for.p()
            return self._stream.read(1)


class SynchConsoleOutput:
    """Writes characters to the console one at a time."""

    def __init__(self, kernel: Any, stream: Optional[TextIO] = None) -> None:
        self.kernel = kernel
        self._stream = stream if stream is not None else sys.stdout
        self._lock = Lock("console out", kernel)
        self._wait_for = Semaphore("console out", 0, kernel)

    def _call_back(self) -> None:
        self._wait_for.v()

    def put_char(self, ch: str) -> None:
        """Write one character and wait until the display has taken it."""
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        with self._lock:
            self._stream.write(ch)
            self._stream.flush()
            self.kernel.pending_interrupts.append(self._call_back)
            self._wait_for.p()