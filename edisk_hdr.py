#!/usr/bin/env python
#
# fenugrec 2025
#
# EDisk header identification
#
# Some ROMs (e.g. Mac Classic) carry one or more removable-disk images, stored
# as an "EDisk" container. This finds and parses the container header.

import collections
import logging
import struct

from edisk_errors import EDiskError, UnsupportedFormat, MalformedLength, OutOfBounds

log = logging.getLogger(__name__)

'''
Header layout, all fields big-endian. Only the interesting parts of the
first 0x200 bytes are listed; offsets are from the start of the container.

struct edisk_hdr {
    u8 unknown[0x80];
    u16 block_size;     // 0x80, always 512
    u16 version;        // 0x82, only version 1 seen
    char sig[12];       // 0x84, "EDisk Gary D"
    u32 disk_len;       // 0x90, bytes; whole number of blocks
    u8 unknown[8];
    u32 table_offset;   // 0x9C, block table, one u32 per block
    u32 data_offset;    // 0xA0, base for block storage offsets
    ...
}
'''

HDR_SIZE = 0x200
EDISK_MAGIC = b'EDisk Gary D'
MAGIC_OFFS = 0x84

BLOCK_SIZE = 512
EDISK_VERSION = 1

# stride of candidate container locations in the ROM
SCAN_STRIDE = 0x10000

edisk_hdr = collections.namedtuple('edisk_hdr', 'location block_size version disk_len table_offset data_offset')


def is_edisk(d: bytes):
    return d[MAGIC_OFFS:MAGIC_OFFS + len(EDISK_MAGIC)] == EDISK_MAGIC


def num_blocks(hdr):
    return hdr.disk_len // hdr.block_size


# parse the container header found at 'location' in 'mem'.
# Returns None if there is no EDisk signature there; raises on a bad header.
def parse_hdr(mem, location: int):
    if location < 0 or location + HDR_SIZE > len(mem):
        raise OutOfBounds(f"header window needs {HDR_SIZE:#x} bytes", location)
    header = mem[location:location + HDR_SIZE]
    if not is_edisk(header):
        return None

    block_size, version = struct.unpack_from('>HH', header, 0x80)
    disk_len = struct.unpack_from('>I', header, 0x90)[0]
    table_offset, data_offset = struct.unpack_from('>II', header, 0x9C)

    if version != EDISK_VERSION:
        raise UnsupportedFormat(f"only version {EDISK_VERSION} is supported, found {version}", location)
    if block_size != BLOCK_SIZE:
        raise UnsupportedFormat(f"only {BLOCK_SIZE}B blocks are supported, found {block_size}", location)
    if disk_len % block_size:
        raise MalformedLength(f"disk length should be in whole blocks, is {disk_len:#x}", location)

    hdr = edisk_hdr(location, block_size, version, disk_len, table_offset, data_offset)
    log.debug(f"hdr @ {location:#x}: {hdr}")
    return hdr


def hdr_info(hdr):
    return (f"EDisk @ {hdr.location:#08x}: v{hdr.version}, {hdr.disk_len:#x} bytes "
            f"({num_blocks(hdr)} blocks of {hdr.block_size}B), "
            f"table @ +{hdr.table_offset:#x}, data @ +{hdr.data_offset:#x}")


import sys
def main():
    print(f"Identifying: '{sys.argv[1]}'")
    with open(sys.argv[1], "rb") as f:
        d = f.read()
    found = 0
    for location in range(0, len(d) - HDR_SIZE + 1, SCAN_STRIDE):
        try:
            hdr = parse_hdr(d, location)
        except EDiskError as e:
            print(f"bad EDisk header: {e}")
            continue
        if hdr is None:
            continue
        found += 1
        print(hdr_info(hdr))
    if not found:
        print("no EDisk found")

if __name__ == '__main__':
        main()
