"""A small instructional operating system kernel: threads, synchronization, console I/O, address spaces, system calls and COFF/NOFF object files."""

__version__ = "0.1.0"