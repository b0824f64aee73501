import io
import struct

import pytest

from nachos.coff import (
    MIPSELMAGIC,
    OMAGIC,
    CoffError,
    FileHeader,
    read_aout_header,
    read_file_header,
    read_section_headers,
)


def pack_section(name, paddr, size, scnptr):
    return struct.pack("<8s6lHHl", name, paddr, paddr + 1, size, scnptr, 5, 6, 7, 8, 9)


def test_magic_numbers_read_from_headers():
    file_data = b"\x62\x01" + struct.pack("<HlllHH", 0, 0, 0, 0, 56, 0)
    assert read_file_header(io.BytesIO(file_data)).magic == 0x0162 == MIPSELMAGIC
    aout_data = b"\x07\x01" + bytes(2 + 13 * 4)
    assert read_aout_header(io.BytesIO(aout_data)).magic == 0o407 == OMAGIC


def test_read_file_header():
    data = struct.pack("<HHlllHH", MIPSELMAGIC, 3, 11, 12, 13, 56, 15)
    stream = io.BytesIO(data)
    header = read_file_header(stream)
    assert header == FileHeader(MIPSELMAGIC, 3, 11, 12, 13, 56, 15)
    assert stream.tell() == len(data)


def test_read_aout_header():
    longs = list(range(100, 113))
    data = struct.pack("<hh13l", OMAGIC, 2, *longs)
    header = read_aout_header(io.BytesIO(data))
    assert header.magic == OMAGIC
    assert header.vstamp == 2
    assert header.tsize == 100
    assert header.gprmask == 107
    assert header.cprmask == (108, 109, 110, 111)
    assert header.gp_value == 112


def test_read_section_headers():
    data = pack_section(b".text", 0, 64, 200) + pack_section(b"abcdefgh", 64, 32, 264)
    stream = io.BytesIO(data)
    sections = read_section_headers(stream, 2)
    assert [s.name for s in sections] == [".text", "abcdefgh"]
    assert sections[0].size == 64
    assert sections[0].scnptr == 200
    assert sections[1].paddr == 64
    assert sections[1].vaddr == 65
    assert sections[1].flags == 9
    assert stream.tell() == len(data)


def test_zero_sections():
    stream = io.BytesIO(b"rest")
    assert read_section_headers(stream, 0) == []
    assert stream.tell() == 0


def test_short_file_header():
    with pytest.raises(CoffError, match="too short"):
        read_file_header(io.BytesIO(b"\x62\x01"))


def test_short_section_table():
    data = pack_section(b".data", 0, 4, 0)
    with pytest.raises(CoffError):
        read_section_headers(io.BytesIO(data), 2)