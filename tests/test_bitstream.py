import pytest

from bitstream import BitStream
from edisk_errors import OutOfBounds


def test_msb_first():
    bs = BitStream(b'\xA5')
    assert [bs.bit() for _ in range(8)] == [1, 0, 1, 0, 0, 1, 0, 1]


def test_bits_across_bytes():
    bs = BitStream(b'\x0F\xF0')
    assert bs.bits(4) == 0
    assert bs.bits(8) == 0xFF
    assert bs.bits(4) == 0


def test_bits_zero():
    bs = BitStream(b'\xFF')
    assert bs.bits(0) == 0
    assert bs.byte_idx() == 0


def test_start_offset():
    bs = BitStream(b'\x00\x00\x81', start=2)
    assert bs.bits(8) == 0x81


def test_byte_idx():
    bs = BitStream(bytes(4))
    assert bs.byte_idx() == 0
    bs.bit()
    assert bs.byte_idx() == 1
    bs.bits(7)
    assert bs.byte_idx() == 1
    bs.bit()
    assert bs.byte_idx() == 2


def test_past_end():
    bs = BitStream(b'\x12\x34', start=1)
    assert bs.bits(8) == 0x34
    with pytest.raises(OutOfBounds) as e:
        bs.bit()
    assert e.value.offset == 2


def test_does_not_modify_data():
    data = bytearray(b'\xDE\xAD')
    bs = BitStream(data)
    assert bs.bits(16) == 0xDEAD
    assert data == b'\xDE\xAD'
