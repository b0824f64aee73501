import struct

import pytest

from nachos.addrspace import (
    AddrSpace,
    ExceptionType,
    TranslationFault,
    USER_STACK_SIZE,
)
from nachos.noff import NOFFMAGIC, NoffFormatError, NoffHeader, Segment

PAGE = 128
PAGES = 32


def _space():
    memory = bytearray(b"\xff" * (PAGE * PAGES))
    return memory, AddrSpace(memory, PAGE, PAGES)


def _image(code=b"ABCDEFGH", data=b"xyz", bss=16, data_addr=256):
    base = NoffHeader.SIZE
    header = NoffHeader(
        Segment(0, base, len(code)),
        Segment(data_addr, base + len(code), len(data)),
        Segment(data_addr + len(data), 0, bss),
    )
    return header.to_bytes() + code + data


def test_memory_is_zeroed():
    memory, _ = _space()
    assert memory == bytes(PAGE * PAGES)


def test_load_copies_segments():
    memory, space = _space()
    header = space.load(_image())
    assert bytes(memory[0:8]) == b"ABCDEFGH"
    assert bytes(memory[256:259]) == b"xyz"
    assert header.uninit_data.size == 16


def test_page_count_covers_program_and_stack():
    _, space = _space()
    space.load(_image())
    needed = 8 + 3 + 16 + USER_STACK_SIZE
    assert space.num_pages * PAGE >= needed
    assert (space.num_pages - 1) * PAGE < needed


def test_initial_registers():
    _, space = _space()
    space.load(_image())
    regs = space.initial_registers()
    assert regs["pc"] == 0
    assert regs["next_pc"] == 4
    assert regs["sp"] == space.num_pages * PAGE - 16


def test_big_endian_header_loads():
    code = b"WXYZ"
    words = [NOFFMAGIC, 0, NoffHeader.SIZE, len(code), 0, 0, 0, 0, 0, 0]
    memory, space = _space()
    space.load(struct.pack(">10i", *words) + code)
    assert bytes(memory[0:4]) == code


def test_bad_magic_rejected():
    _, space = _space()
    with pytest.raises(NoffFormatError):
        space.load(bytes(NoffHeader.SIZE))


def test_program_too_large():
    _, space = _space()
    with pytest.raises(ValueError):
        space.load(_image(bss=PAGE * PAGES))


def test_translate_identity_and_use_bit():
    _, space = _space()
    space.load(_image())
    assert space.translate(130, False) == 130
    assert space.page_table[1].use is True
    assert space.page_table[1].dirty is False


def test_translate_write_sets_dirty():
    _, space = _space()
    space.load(_image())
    assert space.translate(5, True) == 5
    assert space.page_table[0].dirty is True


def test_translate_beyond_address_space():
    _, space = _space()
    space.load(_image())
    with pytest.raises(TranslationFault) as info:
        space.translate(space.num_pages * PAGE, False)
    assert info.value.kind is ExceptionType.AddressErrorException


def test_translate_read_only_write():
    _, space = _space()
    space.load(_image())
    space.page_table[0].read_only = True
    assert space.translate(3, False) == 3
    with pytest.raises(TranslationFault) as info:
        space.translate(3, True)
    assert info.value.kind is ExceptionType.ReadOnlyException


def test_translate_bad_physical_page():
    _, space = _space()
    space.load(_image())
    space.page_table[2].physical_page = PAGES
    with pytest.raises(TranslationFault) as info:
        space.translate(2 * PAGE, False)
    assert info.value.kind is ExceptionType.BusErrorException


def test_translate_before_load_fails():
    _, space = _space()
    with pytest.raises(TranslationFault) as info:
        space.translate(0, False)
    assert info.value.kind is ExceptionType.AddressErrorException


def test_memory_too_small_rejected():
    with pytest.raises(ValueError):
        AddrSpace(bytearray(PAGE), PAGE, PAGES)