"""The Nachos object code format (NOFF) header."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

__all__ = ["NOFFMAGIC", "Segment", "NoffHeader", "NoffFormatError", "parse_noff_header"]

NOFFMAGIC = 0xBADFAD

_FIELDS = "10i"


class NoffFormatError(ValueError):
    """Raised when bytes do not hold a valid NOFF header."""


@dataclass(frozen=True)
class Segment:
    """Where a segment lives in the file and in the virtual address space."""

    virtual_addr: int = 0
    in_file_addr: int = 0
    size: int = 0


@dataclass(frozen=True)
class NoffHeader:
    """A NOFF header: code, initialised data and uninitialised data."""

    code: Segment = field(default_factory=Segment)
    init_data: Segment = field(default_factory=Segment)
    uninit_data: Segment = field(default_factory=Segment)
    magic: int = NOFFMAGIC

    SIZE: ClassVar[int] = struct.calcsize("<" + _FIELDS)

    def _words(self) -> list[int]:
        words = [self.magic]
        for segment in (self.code, self.init_data, self.uninit_data):
            words.extend((segment.virtual_addr, segment.in_file_addr, segment.size))
        return words

    def to_bytes(self) -> bytes:
        """Encode the header in little-endian byte order."""
        return struct.pack("<10I", *(word & 0xFFFFFFFF for word in self._words()))


def parse_noff_header(data: bytes) -> NoffHeader:
    """Decode a NOFF header written in either byte order."""
    if len(data) < NoffHeader.SIZE:
        raise NoffFormatError("NOFF header is truncated")
    for order in ("<", ">"):
        words = struct.unpack_from(order + _FIELDS, data)
        if words[0] == NOFFMAGIC:
            code, init_data, uninit_data = (
                Segment(*words[start:start + 3]) for start in (1, 4, 7)
            )
            return NoffHeader(code, init_data, uninit_data, words[0])
    raise NoffFormatError("bad NOFF magic number")