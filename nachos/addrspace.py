"""Address spaces for user programs: a linear page table and program loading."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from nachos.noff import NoffHeader, parse_noff_header

__all__ = [
    "USER_STACK_SIZE",
    "ExceptionType",
    "TranslationFault",
    "TranslationEntry",
    "AddrSpace",
]

USER_STACK_SIZE = 1024


class ExceptionType(IntEnum):
    """Kinds of exception that transfer control from user code to the kernel."""

    NoException = 0
    SyscallException = 1
    PageFaultException = 2
    ReadOnlyException = 3
    BusErrorException = 4
    AddressErrorException = 5
    OverflowException = 6
    IllegalInstrException = 7
    NumExceptionTypes = 8


class TranslationFault(Exception):
    """Raised when a virtual address cannot be translated."""

    def __init__(self, kind: ExceptionType, vaddr: int) -> None:
        super().__init__(f"{kind.name} at virtual address 0x{vaddr:x}")
        self.kind = kind
        self.vaddr = vaddr


@dataclass
class TranslationEntry:
    """One page table entry."""

    virtual_page: int
    physical_page: int
    valid: bool = True
    use: bool = False
    dirty: bool = False
    read_only: bool = False


class AddrSpace:
    """A user address space mapped one-to-one onto physical memory."""

    def __init__(self, memory: bytearray, page_size: int, num_phys_pages: int) -> None:
        if page_size <= 0 or num_phys_pages <= 0:
            raise ValueError("page size and page count must be positive")
        if len(memory) < page_size * num_phys_pages:
            raise ValueError("memory is smaller than the physical page frames")
        self.memory = memory
        self.page_size = page_size
        self.num_phys_pages = num_phys_pages
        self.page_table = [TranslationEntry(i, i) for i in range(num_phys_pages)]
        self.num_pages = 0
        memory[:] = bytes(len(memory))

    @property
    def memory_size(self) -> int:
        return self.page_size * self.num_phys_pages

    def _copy_segment(self, data: bytes, vaddr: int, in_file: int, size: int) -> None:
        if size <= 0:
            return
        if vaddr < 0 or vaddr + size > self.memory_size:
            raise ValueError("segment does not fit in physical memory")
        chunk = data[in_file:in_file + size] if in_file >= 0 else b""
        self.memory[vaddr:vaddr + len(chunk)] = chunk

    def load(self, data: bytes) -> NoffHeader:
        """Load a NOFF program image into memory and size the address space."""
        header = parse_noff_header(data)
        size = (
            header.code.size
            + header.init_data.size
            + header.uninit_data.size
            + USER_STACK_SIZE
        )
        num_pages = -(-size // self.page_size)
        if num_pages > self.num_phys_pages:
            raise ValueError(
                f"program needs {num_pages} pages but only "
                f"{self.num_phys_pages} are available"
            )
        self.num_pages = num_pages
        for segment in (header.code, header.init_data):
            self._copy_segment(data, segment.virtual_addr, segment.in_file_addr, segment.size)
        return header

    def initial_registers(self) -> dict[str, int]:
        """Return the register values a freshly loaded program starts with."""
        return {
            "pc": 0,
            "next_pc": 4,
            "sp": self.num_pages * self.page_size - 16,
        }

    def translate(self, vaddr: int, writing: bool) -> int:
        """Translate a virtual address to a physical one, updating use and dirty bits."""
        vaddr &= 0xFFFFFFFF
        vpn, offset = divmod(vaddr, self.page_size)
        if vpn >= self.num_pages:
            raise TranslationFault(ExceptionType.AddressErrorException, vaddr)
        entry = self.page_table[vpn]
        if writing and entry.read_only:
            raise TranslationFault(ExceptionType.ReadOnlyException, vaddr)
        pfn = entry.physical_page
        if pfn >= self.num_phys_pages:
            raise TranslationFault(ExceptionType.BusErrorException, vaddr)
        entry.use = True
        if writing:
            entry.dirty = True
        paddr = pfn * self.page_size + offset
        if paddr >= self.memory_size:
            raise TranslationFault(ExceptionType.BusErrorException, vaddr)
        return paddr