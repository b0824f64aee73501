"""Convert a MIPS COFF executable into a NOFF file."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO, Callable

from nachos.coff import (
    MIPSELMAGIC,
    OMAGIC,
    CoffError,
    SectionHeader,
    read_aout_header,
    read_file_header,
    read_section_headers,
)
from nachos.noff import NoffHeader, Segment

__all__ = ["ConversionError", "convert", "main"]

Report = Callable[[str], None]


class ConversionError(Exception):
    """Raised when a COFF file cannot be converted."""


def _copy_section(coff: BinaryIO, out: BinaryIO, section: SectionHeader) -> None:
    try:
        coff.seek(section.scnptr)
        data = coff.read(section.size)
    except (OSError, ValueError) as exc:
        raise ConversionError("File is too short") from exc
    if len(data) != section.size:
        raise ConversionError("File is too short")
    try:
        out.write(data)
    except OSError as exc:
        raise ConversionError("Unable to write file") from exc


def _describe(section: SectionHeader) -> str:
    return '\t"{}", filepos 0x{:x}, mempos 0x{:x}, size 0x{:x}'.format(
        section.name,
        section.scnptr & 0xFFFFFFFF,
        section.paddr & 0xFFFFFFFF,
        section.size & 0xFFFFFFFF,
    )


def _translate(coff: BinaryIO, out: BinaryIO, report: Report) -> NoffHeader:
    try:
        file_header = read_file_header(coff)
        if file_header.magic != MIPSELMAGIC:
            raise ConversionError("File is not a MIPSEL COFF file")
        if read_aout_header(coff).magic != OMAGIC:
            raise ConversionError("File is not a OMAGIC file")
        report(f"numsections {file_header.nscns} ")
        sections = read_section_headers(coff, file_header.nscns)
    except CoffError as exc:
        raise ConversionError(str(exc)) from exc

    code = init_data = uninit_data = Segment()
    in_noff_file = NoffHeader.SIZE
    out.seek(in_noff_file)
    report(f"Loading {len(sections)} sections:")
    for section in sections:
        report(_describe(section))
        if section.size == 0:
            continue
        if section.name in (".text", ".data"):
            segment = Segment(section.paddr, in_noff_file, section.size)
            if section.name == ".text":
                code = segment
            else:
                init_data = segment
            _copy_section(coff, out, section)
            in_noff_file += section.size
        elif section.name == ".bss":
            if uninit_data.size != 0:
                if section.paddr == uninit_data.virtual_addr + uninit_data.size:
                    raise ConversionError("Can't handle both bss and sbss")
                uninit_data = Segment(
                    uninit_data.virtual_addr,
                    uninit_data.in_file_addr,
                    uninit_data.size + section.size,
                )
            else:
                uninit_data = Segment(section.paddr, 0, section.size)
        else:
            raise ConversionError(f"Unknown segment type: {section.name}")

    header = NoffHeader(code, init_data, uninit_data)
    try:
        out.seek(0)
        out.write(header.to_bytes())
    except OSError as exc:
        raise ConversionError("Unable to write file") from exc
    return header


def _convert(coff_path, noff_path, report: Report) -> NoffHeader:
    with open(coff_path, "rb") as coff:
        try:
            with open(noff_path, "wb") as out:
                return _translate(coff, out, report)
        except ConversionError:
            Path(noff_path).unlink(missing_ok=True)
            raise


def convert(coff_path, noff_path) -> NoffHeader:
    """Write the NOFF form of ``coff_path`` to ``noff_path`` and return its header.

    The output file is removed if the conversion fails.
    """
    return _convert(coff_path, noff_path, lambda _line: None)


def main(argv=None) -> int:
    """Command-line entry point: coff2noff <coffFileName> <noffFileName>."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print("Usage: coff2noff <coffFileName> <noffFileName>", file=sys.stderr)
        return 1
    try:
        _convert(args[0], args[1], print)
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"{exc.filename}: {exc.strerror}", file=sys.stderr)
        return 1
    return 0