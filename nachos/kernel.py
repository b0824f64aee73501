"""The kernel: its command-line options, global state and self tests."""

from __future__ import annotations

import random
import re
import sys
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Iterable, Optional, TextIO

from nachos.scheduler import Scheduler
from nachos.synch import Semaphore
from nachos.synchconsole import SynchConsoleInput, SynchConsoleOutput
from nachos.synchlist import SynchList
from nachos.thread import Thread, ThreadStatus

__all__ = ["KernelOptions", "parse_kernel_args", "Kernel"]

_USAGE = (
    "Partial usage: nachos [-rs randomSeed]",
    "Partial usage: nachos [-s]",
    "Partial usage: nachos [-ci consoleIn] [-co consoleOut]",
    "Partial usage: nachos [-nf]",
    "Partial usage: nachos [-n #] [-m #]",
)

_TAKES_VALUE = frozenset({"-rs", "-ci", "-co", "-n", "-m"})
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else 0


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group()) if match else 0.0


@dataclass
class KernelOptions:
    """Settings taken from the command line."""

    random_slice: bool = False
    random_seed: Optional[int] = None
    debug_user_prog: bool = False
    console_in: Optional[str] = None
    console_out: Optional[str] = None
    format_flag: bool = False
    reliability: float = 1.0
    host_name: int = 0


def parse_kernel_args(argv: Iterable[str]) -> KernelOptions:
    """Read the kernel's options from ``argv`` (without the program name).

    Arguments the kernel does not know are ignored.  Numbers are read from
    their leading digits, an unreadable number counting as zero.
    """
    options = KernelOptions()
    args = iter(argv)
    for arg in args:
        value = ""
        if arg in _TAKES_VALUE:
            value = next(args, None)
            if value is None:
                raise ValueError(f"option {arg} needs an argument")
        if arg == "-rs":
            options.random_seed = _leading_int(value)
            options.random_slice = True
        elif arg == "-s":
            options.debug_user_prog = True
        elif arg == "-ci":
            options.console_in = value
        elif arg == "-co":
            options.console_out = value
        elif arg == "-f":
            options.format_flag = True
        elif arg == "-n":
            options.reliability = _leading_float(value)
        elif arg == "-m":
            options.host_name = _leading_int(value)
        elif arg == "-u":
            print("\n".join(_USAGE))
    return options


class Kernel:
    """The kernel's global state: the running thread, ready list and console."""

    def __init__(self, options: Optional[KernelOptions] = None) -> None:
        self.options = options if options is not None else KernelOptions()
        self.host_name = self.options.host_name
        self.random = random.Random(self.options.random_seed)
        self.pending_interrupts: Deque[Callable[[], None]] = deque()
        self._owned_files: list[TextIO] = []

        self.scheduler = Scheduler(self)
        self.current_thread = Thread("main", self)
        self.current_thread.status = ThreadStatus.RUNNING

        try:
            in_stream = self._open(self.options.console_in, "r")
            out_stream = self._open(self.options.console_out, "w")
        except OSError:
            self._close_files()
            raise
        self.synch_console_in = SynchConsoleInput(self, in_stream)
        self.synch_console_out = SynchConsoleOutput(self, out_stream)

    def _open(self, path: Optional[str], mode: str) -> Optional[TextIO]:
        if path is None:
            return None
        stream = open(path, mode, encoding="latin-1", newline="")
        self._owned_files.append(stream)
        return stream

    def _close_files(self) -> None:
        while self._owned_files:
            self._owned_files.pop().close()

    def __enter__(self) -> "Kernel":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._close_files()

    def idle(self) -> None:
        """Wait for the next interrupt and handle it.

        Raises RuntimeError if no interrupt is pending, since then no thread
        could ever become ready again.
        """
        if not self.pending_interrupts:
            raise RuntimeError("no thread is ready to run and no interrupt is pending")
        self.pending_interrupts.popleft()()

    def thread_self_test(self) -> None:
        """Exercise thread switching, semaphores and synchronised lists."""
        self._thread_switch_test()
        self._semaphore_test()
        self._synch_list_test(9)

    def console_test(self) -> None:
        """Echo console input to console output until the input ends."""
        print("Testing the console device.")
        print("Typed characters will be echoed, until ^D is typed.")
        print("Note newlines are needed to flush input through UNIX.", flush=True)
        while ch := self.synch_console_in.get_char():
            self.synch_console_out.put_char(ch)
        print()

    def _simple_thread(self, which: int) -> None:
        for num in range(5):
            print(f"*** thread {which} looped {num} times")
            self.current_thread.yield_cpu()

    @staticmethod
    def _check(thread: Thread) -> None:
        if thread.error is not None:
            raise RuntimeError(f"thread {thread.name!r} failed") from thread.error

    def _thread_switch_test(self) -> None:
        forked = Thread("forked thread", self)
        forked.fork(self._simple_thread, 1)
        self.current_thread.yield_cpu()
        self._simple_thread(0)
        self._check(forked)

    def _semaphore_test(self) -> None:
        test = Semaphore("test", 0, self)
        ping = Semaphore("ping", 0, self)

        def helper(pong: Semaphore) -> None:
            for _ in range(10):
                ping.p()
                pong.v()

        thread = Thread("ping", self)
        thread.fork(helper, test)
        for _ in range(10):
            ping.v()
            test.p()
        self._check(thread)

    def _synch_list_test(self, value: Any) -> None:
        items: SynchList[Any] = SynchList(self)
        ping: SynchList[Any] = SynchList(self)

        def helper(_: Any) -> None:
            for _ in range(10):
                items.append(ping.remove_front())

        thread = Thread("ping", self)
        thread.fork(helper, None)
        for _ in range(10):
            ping.append(value)
            if items.remove_front() != value:
                raise RuntimeError("synchronised list returned the wrong value")
        self._check(thread)