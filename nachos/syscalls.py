"""System call codes and the kernel side of the simplest system calls."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["SyscallCode", "CONSOLE_IN", "CONSOLE_OUT", "sys_add"]

CONSOLE_IN = 0
CONSOLE_OUT = 1


class SyscallCode(IntEnum):
    """Codes a user program places in r2 to choose a system call."""

    HALT = 0
    EXIT = 1
    EXEC = 2
    JOIN = 3
    CREATE = 4
    REMOVE = 5
    OPEN = 6
    READ = 7
    WRITE = 8
    SEEK = 9
    CLOSE = 10
    THREAD_FORK = 11
    THREAD_YIELD = 12
    EXEC_V = 13
    THREAD_EXIT = 14
    THREAD_JOIN = 15
    ADD = 42
    READ_NUM = 43
    PRINT_NUM = 44
    READ_CHAR = 45
    PRINT_CHAR = 46
    RANDOM_NUM = 47
    READ_STRING = 48
    PRINT_STRING = 49


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def sys_add(op1: int, op2: int) -> int:
    """Add two operands as 32-bit signed machine integers."""
    return _to_int32(op1 + op2)