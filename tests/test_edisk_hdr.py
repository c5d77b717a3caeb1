import pytest

from edisk_errors import EDiskError, UnsupportedFormat, MalformedLength, OutOfBounds
from edisk_hdr import parse_hdr, is_edisk, num_blocks, hdr_info, HDR_SIZE

from romgen import make_hdr, make_rom, LOCATION, TABLE_OFFSET, DATA_OFFSET


def test_no_signature():
    assert parse_hdr(bytes(0x1000), 0) is None


def test_signature_mismatch():
    hdr = make_hdr(512, magic=b'EDisk Gary E')
    assert not is_edisk(hdr)
    assert parse_hdr(hdr, 0) is None


def test_parse_fields():
    rom = make_rom([(0, 0)] * 3)
    hdr = parse_hdr(rom, LOCATION)
    assert hdr.location == LOCATION
    assert hdr.block_size == 512
    assert hdr.version == 1
    assert hdr.disk_len == 3 * 512
    assert hdr.table_offset == TABLE_OFFSET
    assert hdr.data_offset == DATA_OFFSET
    assert num_blocks(hdr) == 3


def test_bad_version():
    with pytest.raises(UnsupportedFormat) as e:
        parse_hdr(make_hdr(512, version=2), 0)
    assert "version" in str(e.value)


def test_bad_block_size():
    with pytest.raises(UnsupportedFormat):
        parse_hdr(make_hdr(1024, block_size=1024), 0)


def test_bad_length():
    rom = make_rom([], disk_len=700)
    with pytest.raises(MalformedLength) as e:
        parse_hdr(rom, LOCATION)
    assert e.value.offset == LOCATION
    assert isinstance(e.value, EDiskError)


def test_short_window():
    with pytest.raises(OutOfBounds):
        parse_hdr(make_hdr(512)[:HDR_SIZE - 1], 0)


def test_error_message():
    with pytest.raises(EDiskError) as e:
        parse_hdr(make_rom([], disk_len=100), LOCATION)
    assert str(e.value).startswith("malformed length @ 0x10000")


def test_hdr_info():
    hdr = parse_hdr(make_rom([(0, 0)] * 2), LOCATION)
    info = hdr_info(hdr)
    assert "0x010000" in info
    assert "2 blocks" in info
