import struct

import pytest

from nachos.noff import (
    NOFFMAGIC,
    NoffFormatError,
    NoffHeader,
    Segment,
    parse_noff_header,
)


def sample_header():
    return NoffHeader(
        code=Segment(0, NoffHeader.SIZE, 128),
        init_data=Segment(128, NoffHeader.SIZE + 128, 64),
        uninit_data=Segment(192, 0, 32),
    )


def test_new_header_carries_magic():
    assert NoffHeader().magic == 0xBADFAD
    assert NoffHeader().magic == NOFFMAGIC


def test_round_trip():
    header = sample_header()
    assert parse_noff_header(header.to_bytes()) == header


def test_encoded_length_matches_size():
    assert len(sample_header().to_bytes()) == NoffHeader.SIZE


def test_default_segments_are_empty():
    header = parse_noff_header(NoffHeader().to_bytes())
    assert header.code == Segment()
    assert header.uninit_data.size == 0
    assert header.magic == NOFFMAGIC


def test_big_endian_header_is_accepted():
    header = sample_header()
    big = struct.pack(">10i", *struct.unpack("<10i", header.to_bytes()))
    assert parse_noff_header(big) == header


def test_trailing_bytes_are_ignored():
    header = sample_header()
    assert parse_noff_header(header.to_bytes() + b"payload") == header


def test_bad_magic():
    with pytest.raises(NoffFormatError):
        parse_noff_header(bytes(NoffHeader.SIZE))


def test_truncated():
    with pytest.raises(NoffFormatError):
        parse_noff_header(sample_header().to_bytes()[:-1])