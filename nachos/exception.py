"""The kernel side of the system calls that user programs make.

User memory is a flat byte array in which virtual and physical addresses
coincide.  Console input and output are any objects with ``get_char()``
(returning "" at end of input) and ``put_char(ch)``.  Files live in a host
directory; an open-file table maps small integer ids to open files, with
ids 0 and 1 standing for console input and console output.
"""

from __future__ import annotations

import random
import time
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional, Sequence, Union

from nachos.syscalls import CONSOLE_IN, CONSOLE_OUT, SyscallCode, sys_add

__all__ = [
    "MAX_INT",
    "MIN_INT",
    "MAX_LENGTH_STRING",
    "MAX_FILE_LENGTH",
    "MAX_OPENING_FILE",
    "Halt",
    "user_to_kernel",
    "kernel_to_user",
    "SystemCalls",
]

MAX_INT = 2147483647
MIN_INT = -2147483648
MAX_LENGTH_STRING = 255
MAX_FILE_LENGTH = 32
MAX_OPENING_FILE = 10


class Halt(Exception):
    """Raised when a user program asks the machine to shut down."""


class _ConsoleSlot:
    """Marks an open-file table entry that stands for the console."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<console {self.name}>"


Slot = Union[_ConsoleSlot, BinaryIO, None]


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def user_to_kernel(memory: bytearray, addr: int, limit: int) -> bytes:
    """Copy a NUL-terminated string of at most ``limit`` bytes out of user memory.

    The terminating NUL is not part of the result.
    """
    if limit <= 0:
        return b""
    if addr < 0 or addr >= len(memory):
        raise IndexError(f"user address 0x{addr:x} is outside memory")
    out = bytearray()
    for offset in range(limit):
        position = addr + offset
        if position >= len(memory):
            raise IndexError(f"user address 0x{position:x} is outside memory")
        byte = memory[position]
        if byte == 0:
            break
        out.append(byte)
    return bytes(out)


def kernel_to_user(memory: bytearray, addr: int, length: int, data: bytes) -> int:
    """Copy ``data`` into user memory, at most ``length`` bytes, through the first NUL.

    Returns the number of bytes written, or -1 if ``length`` is negative.
    """
    if length < 0:
        return -1
    if length == 0:
        return 0
    if addr < 0 or addr + 1 > len(memory):
        raise IndexError(f"user address 0x{addr:x} is outside memory")
    written = 0
    while written < length:
        byte = data[written] if written < len(data) else 0
        position = addr + written
        if position >= len(memory):
            raise IndexError(f"user address 0x{position:x} is outside memory")
        memory[position] = byte
        written += 1
        if byte == 0:
            break
    return written


class SystemCalls:
    """Handlers for the system calls, each returning what goes back in r2."""

    def __init__(self, console_in: Any, console_out: Any, file_root: Any, memory: bytearray) -> None:
        self.console_in = console_in
        self.console_out = console_out
        self.file_root = Path(file_root)
        self.memory = memory
        self.opening_files: list[Slot] = [None] * MAX_OPENING_FILE
        self.opening_files[CONSOLE_IN] = _ConsoleSlot("in")
        self.opening_files[CONSOLE_OUT] = _ConsoleSlot("out")

    def __enter__(self) -> "SystemCalls":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close_all()

    def close_all(self) -> None:
        """Close every open host file in the table."""
        for slot_id, slot in enumerate(self.opening_files):
            if slot is not None and not isinstance(slot, _ConsoleSlot):
                slot.close()
                self.opening_files[slot_id] = None

    # -- console ---------------------------------------------------------

    def _get_char(self) -> str:
        return self.console_in.get_char()

    def _put_text(self, text: str) -> None:
        for ch in text:
            self.console_out.put_char(ch)

    def _read_line(self, limit: int) -> str:
        """Read characters up to a newline or end of input, stopping at ``limit``."""
        chars: list[str] = []
        while (ch := self._get_char()) not in ("\n", ""):
            chars.append(ch)
            if len(chars) >= limit:
                break
        return "".join(chars)

    def read_num(self) -> int:
        """Read a line holding a 32-bit integer; anything else reads as 0."""
        result = 0
        length = 0
        is_error = False
        is_negative = False
        first = True
        while (ch := self._get_char()) not in ("\n", ""):
            if first:
                first = False
                if ch == "-":
                    is_negative = True
                    continue
            length += 1
            if "0" <= ch <= "9":
                result = result * 10 + (ord(ch) - ord("0"))
            else:
                is_error = True
        if is_negative:
            result = -result
        if length > 10 or not MIN_INT <= result <= MAX_INT:
            is_error = True
        return 0 if is_error else result

    def print_num(self, number: int) -> None:
        """Print a 32-bit integer in decimal."""
        self._put_text(str(_int32(number)))

    def read_char(self) -> str:
        """Read one character from the console."""
        return self._get_char()

    def print_char(self, ch: Union[int, str]) -> None:
        """Print one character; an integer is taken as a character code."""
        if isinstance(ch, int):
            ch = chr(ch & 0xFF)
        self.console_out.put_char(ch)

    def random_num(self) -> int:
        """Return a pseudo-random non-negative 31-bit integer."""
        return random.Random(int(time.time())).randrange(MAX_INT + 1)

    def read_string(self, addr: int, length: int) -> None:
        """Read a line of at most ``length`` characters into user memory at ``addr``."""
        text = self._read_line(length)
        kernel_to_user(self.memory, addr, length, text.encode("latin-1") + b"\0")

    def print_string(self, addr: int) -> None:
        """Print the NUL-terminated string at ``addr`` in user memory."""
        data = user_to_kernel(self.memory, addr, MAX_LENGTH_STRING)
        self._put_text(data.decode("latin-1"))

    # -- files -------------------------------------------------------------

    def _file_name(self, addr: int) -> str:
        return user_to_kernel(self.memory, addr, MAX_FILE_LENGTH).decode("latin-1")

    def _path(self, name: str) -> Path:
        return self.file_root / name

    def create(self, addr: int) -> int:
        """Create an empty file; return 0 on success, -1 on failure."""
        name = self._file_name(addr)
        if not name:
            return -1
        try:
            with open(self._path(name), "wb"):
                pass
        except OSError:
            return -1
        return 0

    def remove(self, addr: int) -> int:
        """Remove a file; return 1 on success, -1 on failure."""
        name = self._file_name(addr)
        if not name:
            return -1
        try:
            self._path(name).unlink()
        except OSError:
            return -1
        return 1

    def _find_free_slot(self) -> int:
        for slot_id, slot in enumerate(self.opening_files):
            if slot_id in (CONSOLE_IN, CONSOLE_OUT):
                continue
            if slot is None:
                return slot_id
        return -1

    def open(self, addr: int) -> int:
        """Open a file; return its id, or -1 if it is missing or the table is full."""
        name = self._file_name(addr)
        slot_id = self._find_free_slot()
        if slot_id == -1 or not name:
            return -1
        try:
            handle = open(self._path(name), "r+b", buffering=0)
        except OSError:
            return -1
        self.opening_files[slot_id] = handle
        return slot_id

    def _slot(self, file_id: int) -> Slot:
        if file_id < 0 or file_id > MAX_OPENING_FILE - 1:
            return None
        return self.opening_files[file_id]

    def close(self, file_id: int) -> int:
        """Close an open file; return 1 on success, -1 on failure."""
        slot = self._slot(file_id)
        if slot is None:
            return -1
        if not isinstance(slot, _ConsoleSlot):
            slot.close()
        self.opening_files[file_id] = None
        return 1

    def read(self, addr: int, size: int, file_id: int) -> int:
        """Read up to ``size`` bytes into user memory.

        Returns the number of bytes read, -1 on failure, -2 at end of file.
        """
        slot = self._slot(file_id)
        if slot is None or file_id == CONSOLE_OUT:
            return -1
        if isinstance(slot, _ConsoleSlot):
            text = self._read_line(size)
            kernel_to_user(self.memory, addr, len(text), text.encode("latin-1"))
            return len(text)
        before = slot.tell()
        data = slot.read(max(size, 0)) or b""
        if not data:
            return -2
        count = slot.tell() - before
        kernel_to_user(self.memory, addr, count, data)
        return count

    def write(self, addr: int, size: int, file_id: int) -> int:
        """Write ``size`` bytes from user memory; return the count, or -1 on failure."""
        slot = self._slot(file_id)
        if slot is None or file_id == CONSOLE_IN:
            return -1
        data = user_to_kernel(self.memory, addr, size)
        if isinstance(slot, _ConsoleSlot):
            text = data.decode("latin-1").split("\n", 1)[0]
            self._put_text(text)
            return len(text) - 1
        if size <= 0:
            return -1
        before = slot.tell()
        if not slot.write(data.ljust(size, b"\0")):
            return -1
        return slot.tell() - before

    def seek(self, position: int, file_id: int) -> int:
        """Move the file position; -1 means the end. Return it, or -1 on failure."""
        slot = self._slot(file_id)
        if slot is None or isinstance(slot, _ConsoleSlot):
            return -1
        length = slot.seek(0, 2)
        if position == -1:
            position = length
        if position < 0 or position > length:
            slot.seek(0)
            return -1
        slot.seek(position)
        return position

    # -- dispatch ----------------------------------------------------------

    def dispatch(self, code: int, args: Sequence[int] = ()) -> Optional[Union[int, str]]:
        """Run the system call ``code`` with ``args`` and return its result.

        Raises Halt for the halt call and ValueError for a call that is not
        handled.
        """
        try:
            call = SyscallCode(code)
        except ValueError:
            raise ValueError(f"Unexpected system call {code}") from None
        if call is SyscallCode.HALT:
            raise Halt("Shutdown, initiated by user program.")
        handlers: dict[SyscallCode, Callable[..., Any]] = {
            SyscallCode.ADD: sys_add,
            SyscallCode.READ_NUM: self.read_num,
            SyscallCode.PRINT_NUM: self.print_num,
            SyscallCode.READ_CHAR: self.read_char,
            SyscallCode.PRINT_CHAR: self.print_char,
            SyscallCode.RANDOM_NUM: self.random_num,
            SyscallCode.READ_STRING: self.read_string,
            SyscallCode.PRINT_STRING: self.print_string,
            SyscallCode.CREATE: self.create,
            SyscallCode.REMOVE: self.remove,
            SyscallCode.OPEN: self.open,
            SyscallCode.CLOSE: self.close,
            SyscallCode.READ: self.read,
            SyscallCode.WRITE: self.write,
            SyscallCode.SEEK: self.seek,
        }
        handler = handlers.get(call)
        if handler is None:
            raise ValueError(f"Unexpected system call {int(call)}")
        return handler(*args)