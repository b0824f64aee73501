"""Reading the headers of a little-endian MIPS COFF object file."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, ClassVar

__all__ = [
    "MIPSELMAGIC",
    "OMAGIC",
    "SOMAGIC",
    "CoffError",
    "FileHeader",
    "AoutHeader",
    "SectionHeader",
    "read_file_header",
    "read_aout_header",
    "read_section_headers",
]

MIPSELMAGIC = 0x0162
OMAGIC = 0o407
SOMAGIC = 0x0701

_FILE_FORMAT = struct.Struct("<HHlllHH")
_AOUT_FORMAT = struct.Struct("<hh13l")
_SECTION_FORMAT = struct.Struct("<8s6lHHl")


class CoffError(ValueError):
    """Raised when a COFF file cannot be read."""


@dataclass(frozen=True)
class FileHeader:
    """The COFF file header."""

    magic: int
    nscns: int
    timdat: int
    symptr: int
    nsyms: int
    opthdr: int
    flags: int

    SIZE: ClassVar[int] = _FILE_FORMAT.size


@dataclass(frozen=True)
class AoutHeader:
    """The a.out optional (system) header."""

    magic: int
    vstamp: int
    tsize: int
    dsize: int
    bsize: int
    entry: int
    text_start: int
    data_start: int
    bss_start: int
    gprmask: int
    cprmask: tuple[int, int, int, int]
    gp_value: int

    SIZE: ClassVar[int] = _AOUT_FORMAT.size


@dataclass(frozen=True)
class SectionHeader:
    """One COFF section header."""

    name: str
    paddr: int
    vaddr: int
    size: int
    scnptr: int
    relptr: int
    lnnoptr: int
    nreloc: int
    nlnno: int
    flags: int

    SIZE: ClassVar[int] = _SECTION_FORMAT.size


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise CoffError("File is too short")
    return data


def read_file_header(stream: BinaryIO) -> FileHeader:
    """Read the file header at the stream's position."""
    return FileHeader(*_FILE_FORMAT.unpack(_read_exactly(stream, _FILE_FORMAT.size)))


def read_aout_header(stream: BinaryIO) -> AoutHeader:
    """Read the a.out header at the stream's position."""
    magic, vstamp, *longs = _AOUT_FORMAT.unpack(_read_exactly(stream, _AOUT_FORMAT.size))
    return AoutHeader(magic, vstamp, *longs[:8], tuple(longs[8:12]), longs[12])


def _section(raw: bytes) -> SectionHeader:
    name, *rest = _SECTION_FORMAT.unpack(raw)
    return SectionHeader(name.split(b"\0", 1)[0].decode("latin-1"), *rest)


def read_section_headers(stream: BinaryIO, count: int) -> list[SectionHeader]:
    """Read ``count`` consecutive section headers."""
    return [_section(_read_exactly(stream, _SECTION_FORMAT.size)) for _ in range(count)]